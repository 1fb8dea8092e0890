"""Per-schema row statistics from information_schema.table_statistics."""

from __future__ import annotations

import logging
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

log = logging.getLogger(__name__)

USERSTAT_CHECK_QUERY = (
    "SHOW GLOBAL VARIABLES WHERE Variable_name = 'userstat' "
    "OR Variable_name = 'userstat_running'"
)

SCHEMA_STAT_QUERY = """
		SELECT
			TABLE_SCHEMA,
			SUM(ROWS_READ) AS ROWS_READ,
			SUM(ROWS_CHANGED) AS ROWS_CHANGED,
			SUM(ROWS_CHANGED_X_INDEXES) AS ROWS_CHANGED_X_INDEXES
		FROM information_schema.TABLE_STATISTICS
		GROUP BY TABLE_SCHEMA;
		"""

SCHEMA_STATS_ROWS_READ_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_read_total"),
    "The number of rows read from the schema.",
    ("schema",),
)
SCHEMA_STATS_ROWS_CHANGED_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_changed_total"),
    "The number of rows changed in the schema.",
    ("schema",),
)
SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC = Desc(
    build_fq_name(
        NAMESPACE, INFORMATION_SCHEMA, "schema_statistics_rows_changed_x_indexes_total"
    ),
    "The number of rows changed in the schema, multiplied by the number of indexes changed.",
    ("schema",),
)


def userstat_enabled(instance: Instance) -> bool:
    """Tell whether the server collects user statistics (userstat is not OFF)."""
    try:
        var_name, var_value = instance.query_row(USERSTAT_CHECK_QUERY)[:2]
    except Exception:
        log.debug("Detailed statistics are not available.")
        return False
    if str(var_value) == "OFF":
        log.debug("MySQL variable is OFF: %s", var_name)
        return False
    return True


class ScrapeSchemaStat:
    """Collects information_schema.table_statistics grouped by schema."""

    name: ClassVar[str] = "info_schema.schemastats"
    help: ClassVar[str] = "If running with userstat=1, set to true to collect schema statistics"
    version: ClassVar[float] = 5.1

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield rows read, changed and changed times indexes for every schema."""
        if not userstat_enabled(instance):
            return
        for schema, rows_read, rows_changed, rows_changed_x_indexes in instance.query(
            SCHEMA_STAT_QUERY
        ):
            schema = str(schema)
            yield const_metric(
                SCHEMA_STATS_ROWS_READ_DESC, ValueType.COUNTER, float(int(rows_read)), schema
            )
            yield const_metric(
                SCHEMA_STATS_ROWS_CHANGED_DESC,
                ValueType.COUNTER,
                float(int(rows_changed)),
                schema,
            )
            yield const_metric(
                SCHEMA_STATS_ROWS_CHANGED_X_INDEXES_DESC,
                ValueType.COUNTER,
                float(int(rows_changed_x_indexes)),
                schema,
            )