"""Per-user statistics from information_schema.user_statistics."""

from __future__ import annotations

from typing import ClassVar, Iterator

from .instance import Instance
from .metrics import (
    INFORMATION_SCHEMA,
    NAMESPACE,
    Desc,
    Metric,
    ValueType,
    build_fq_name,
    const_metric,
)
from .schemastats import userstat_enabled

USER_STAT_QUERY = "SELECT * FROM information_schema.user_statistics"

_LABELS = ("user",)


def _desc(name: str, help_text: str) -> Desc:
    return Desc(build_fq_name(NAMESPACE, INFORMATION_SCHEMA, name), help_text, _LABELS)


# Known user statistics columns mapped to their value type and descriptor.
# Columns not listed here are reported as untyped.
USER_STATISTICS_TYPES: dict[str, tuple[ValueType, Desc]] = {
    "TOTAL_CONNECTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_total_connections",
        "The number of connections created for this user.")),
    "CONCURRENT_CONNECTIONS": (ValueType.GAUGE, _desc(
        "user_statistics_concurrent_connections",
        "The number of concurrent connections for this user.")),
    "CONNECTED_TIME": (ValueType.COUNTER, _desc(
        "user_statistics_connected_time_seconds_total",
        "The cumulative number of seconds elapsed while there were connections from this user.")),
    "BUSY_TIME": (ValueType.COUNTER, _desc(
        "user_statistics_busy_seconds_total",
        "The cumulative number of seconds there was activity on connections from this user.")),
    "CPU_TIME": (ValueType.COUNTER, _desc(
        "user_statistics_cpu_time_seconds_total",
        "The cumulative CPU time elapsed, in seconds, while servicing this user's connections.")),
    "BYTES_RECEIVED": (ValueType.COUNTER, _desc(
        "user_statistics_bytes_received_total",
        "The number of bytes received from this user’s connections.")),
    "BYTES_SENT": (ValueType.COUNTER, _desc(
        "user_statistics_bytes_sent_total",
        "The number of bytes sent to this user’s connections.")),
    "BINLOG_BYTES_WRITTEN": (ValueType.COUNTER, _desc(
        "user_statistics_binlog_bytes_written_total",
        "The number of bytes written to the binary log from this user’s connections.")),
    "ROWS_READ": (ValueType.COUNTER, _desc(
        "user_statistics_rows_read_total",
        "The number of rows read by this user's connections.")),
    "ROWS_SENT": (ValueType.COUNTER, _desc(
        "user_statistics_rows_sent_total",
        "The number of rows sent by this user's connections.")),
    "ROWS_DELETED": (ValueType.COUNTER, _desc(
        "user_statistics_rows_deleted_total",
        "The number of rows deleted by this user's connections.")),
    "ROWS_INSERTED": (ValueType.COUNTER, _desc(
        "user_statistics_rows_inserted_total",
        "The number of rows inserted by this user's connections.")),
    "ROWS_FETCHED": (ValueType.COUNTER, _desc(
        "user_statistics_rows_fetched_total",
        "The number of rows fetched by this user’s connections.")),
    "ROWS_UPDATED": (ValueType.COUNTER, _desc(
        "user_statistics_rows_updated_total",
        "The number of rows updated by this user’s connections.")),
    "TABLE_ROWS_READ": (ValueType.COUNTER, _desc(
        "user_statistics_table_rows_read_total",
        "The number of rows read from tables by this user’s connections. "
        "(It may be different from ROWS_FETCHED.)")),
    "SELECT_COMMANDS": (ValueType.COUNTER, _desc(
        "user_statistics_select_commands_total",
        "The number of SELECT commands executed from this user’s connections.")),
    "UPDATE_COMMANDS": (ValueType.COUNTER, _desc(
        "user_statistics_update_commands_total",
        "The number of UPDATE commands executed from this user’s connections.")),
    "OTHER_COMMANDS": (ValueType.COUNTER, _desc(
        "user_statistics_other_commands_total",
        "The number of other commands executed from this user’s connections.")),
    "COMMIT_TRANSACTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_commit_transactions_total",
        "The number of COMMIT commands issued by this user’s connections.")),
    "ROLLBACK_TRANSACTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_rollback_transactions_total",
        "The number of ROLLBACK commands issued by this user’s connections.")),
    "DENIED_CONNECTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_denied_connections_total",
        "The number of connections denied to this user.")),
    "LOST_CONNECTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_lost_connections_total",
        "The number of this user’s connections that were terminated uncleanly.")),
    "ACCESS_DENIED": (ValueType.COUNTER, _desc(
        "user_statistics_access_denied_total",
        "The number of times this user’s connections issued commands that were denied.")),
    "EMPTY_QUERIES": (ValueType.COUNTER, _desc(
        "user_statistics_empty_queries_total",
        "The number of times this user’s connections sent empty queries to the server.")),
    "TOTAL_SSL_CONNECTIONS": (ValueType.COUNTER, _desc(
        "user_statistics_total_ssl_connections_total",
        "The number of times this user’s connections connected using SSL to the server.")),
}


def _column_metric(column: str) -> tuple[ValueType, Desc]:
    known = USER_STATISTICS_TYPES.get(column)
    if known is not None:
        return known
    return ValueType.UNTYPED, _desc(
        f"user_statistics_{column.lower()}", f"Unsupported metric from column {column}"
    )


class ScrapeUserStat:
    """Collects from information_schema.user_statistics."""

    name: ClassVar[str] = "info_schema.userstats"
    help: ClassVar[str] = "If running with userstat=1, set to true to collect user statistics"
    version: ClassVar[float] = 5.1

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield one metric per statistics column for every user.

        The first column is the user name; every other column must be numeric.
        """
        if not userstat_enabled(instance):
            return
        column_names, rows = instance.columns(USER_STAT_QUERY)
        stat_columns = [_column_metric(str(column)) for column in column_names[1:]]
        for row in rows:
            if len(row) != len(column_names):
                raise ValueError(
                    f"expected {len(column_names)} columns, got {len(row)}"
                )
            user, *values = row
            user = str(user)
            for (value_type, desc), value in zip(stat_columns, values):
                yield const_metric(desc, value_type, float(value), user)