"""User limits and privileges from mysql.user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator

from .instance import Instance
from .metrics import NAMESPACE, Desc, Metric, ValueType, build_fq_name, const_metric

MYSQL_SUBSYSTEM = "mysql"

PRIVILEGE_COLUMNS = (
    "Select_priv", "Insert_priv", "Update_priv", "Delete_priv", "Create_priv",
    "Drop_priv", "Reload_priv", "Shutdown_priv", "Process_priv", "File_priv",
    "Grant_priv", "References_priv", "Index_priv", "Alter_priv", "Show_db_priv",
    "Super_priv", "Create_tmp_table_priv", "Lock_tables_priv", "Execute_priv",
    "Repl_slave_priv", "Repl_client_priv", "Create_view_priv", "Show_view_priv",
    "Create_routine_priv", "Alter_routine_priv", "Create_user_priv", "Event_priv",
    "Trigger_priv", "Create_tablespace_priv",
)

LIMIT_COLUMNS = ("max_questions", "max_updates", "max_connections", "max_user_connections")

_ALL_COLUMNS = ("user", "host", *PRIVILEGE_COLUMNS, *LIMIT_COLUMNS)

MYSQL_USER_QUERY = (
    "SELECT\n    "
    + ",\n    ".join(_ALL_COLUMNS)
    + "\n  FROM mysql.user\n"
)

LABEL_NAMES = ("mysql_user", "hostmask")

USER_MAX_QUESTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_questions"),
    "The number of max_questions by user.",
    LABEL_NAMES,
)
USER_MAX_UPDATES_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_updates"),
    "The number of max_updates by user.",
    LABEL_NAMES,
)
USER_MAX_CONNECTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_connections"),
    "The number of max_connections by user.",
    LABEL_NAMES,
)
USER_MAX_USER_CONNECTIONS_DESC = Desc(
    build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, "max_user_connections"),
    "The number of max_user_connections by user.",
    LABEL_NAMES,
)

_LIMIT_DESCS = (
    USER_MAX_QUESTIONS_DESC,
    USER_MAX_UPDATES_DESC,
    USER_MAX_CONNECTIONS_DESC,
    USER_MAX_USER_CONNECTIONS_DESC,
)

_UINT32_MAX = 0xFFFFFFFF


def _privilege_value(raw: object) -> float | None:
    """Map a Y/N privilege flag to 1 or 0; anything else is not a privilege."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", "replace")
    if raw == "Y":
        return 1.0
    if raw == "N":
        return 0.0
    return None


def _limit(raw: object) -> int:
    value = int(raw)
    if not 0 <= value <= _UINT32_MAX:
        raise ValueError(f"value {value} out of range for a user limit")
    return value


@dataclass(frozen=True)
class ScrapeUser:
    """Collects user limits, and optionally privileges, from mysql.user."""

    privileges: bool = False

    name: ClassVar[str] = MYSQL_SUBSYSTEM + ".user"
    help: ClassVar[str] = "Collect data from mysql.user"
    version: ClassVar[float] = 5.1

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield privilege gauges (when enabled) and the four limits for every account."""
        column_names, rows = instance.columns(MYSQL_USER_QUERY)
        for row in rows:
            if len(row) != len(_ALL_COLUMNS):
                raise ValueError(f"expected {len(_ALL_COLUMNS)} columns, got {len(row)}")
            user, host = str(row[0]), str(row[1])
            limits = [_limit(value) for value in row[-len(LIMIT_COLUMNS):]]

            if self.privileges:
                for column, raw in zip(column_names, row):
                    value = _privilege_value(raw)
                    if value is None:
                        continue
                    desc = Desc(
                        build_fq_name(NAMESPACE, MYSQL_SUBSYSTEM, str(column).lower()),
                        f"{column} by user.",
                        LABEL_NAMES,
                    )
                    yield const_metric(desc, ValueType.GAUGE, value, user, host)

            for desc, value in zip(_LIMIT_DESCS, limits):
                yield const_metric(desc, ValueType.GAUGE, float(value), user, host)