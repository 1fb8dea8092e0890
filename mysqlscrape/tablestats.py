"""Per-table row statistics from information_schema.table_statistics."""

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

TABLE_STAT_QUERY = """
		SELECT
		  TABLE_SCHEMA,
		  TABLE_NAME,
		  ROWS_READ,
		  ROWS_CHANGED,
		  ROWS_CHANGED_X_INDEXES
		  FROM information_schema.table_statistics
		"""

_LABELS = ("schema", "table")

TABLE_STATS_ROWS_READ_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_read_total"),
    "The number of rows read from the table.",
    _LABELS,
)
TABLE_STATS_ROWS_CHANGED_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_changed_total"),
    "The number of rows changed in the table.",
    _LABELS,
)
TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC = Desc(
    build_fq_name(
        NAMESPACE, INFORMATION_SCHEMA, "table_statistics_rows_changed_x_indexes_total"
    ),
    "The number of rows changed in the table, multiplied by the number of indexes changed.",
    _LABELS,
)


class ScrapeTableStat:
    """Collects information_schema.table_statistics per table."""

    name: ClassVar[str] = "info_schema.tablestats"
    help: ClassVar[str] = "If running with userstat=1, set to true to collect table statistics"
    version: ClassVar[float] = 5.1

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield rows read, changed and changed times indexes for every table."""
        if not userstat_enabled(instance):
            return
        for schema, table, rows_read, rows_changed, rows_changed_x_indexes in instance.query(
            TABLE_STAT_QUERY
        ):
            labels = (str(schema), str(table))
            yield const_metric(
                TABLE_STATS_ROWS_READ_DESC, ValueType.COUNTER, float(int(rows_read)), *labels
            )
            yield const_metric(
                TABLE_STATS_ROWS_CHANGED_DESC,
                ValueType.COUNTER,
                float(int(rows_changed)),
                *labels,
            )
            yield const_metric(
                TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC,
                ValueType.COUNTER,
                float(int(rows_changed_x_indexes)),
                *labels,
            )