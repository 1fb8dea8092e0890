"""Statement digests from performance_schema.events_statements_summary_by_digest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator

from .instance import Flavor, Instance, Version
from .metrics import (
    NAMESPACE,
    PERFORMANCE_SCHEMA,
    PICO_SECONDS,
    Desc,
    Metric,
    ValueType,
    build_fq_name,
    const_metric,
    const_summary,
)

PERF_EVENTS_STATEMENTS_QUERY = """
	SELECT
	    ifnull(SCHEMA_NAME, 'NONE') as SCHEMA_NAME,
	    DIGEST,
	    LEFT(DIGEST_TEXT, {digest_text_limit}) as DIGEST_TEXT,
	    COUNT_STAR,
	    SUM_TIMER_WAIT,
	    SUM_ERRORS,
	    SUM_WARNINGS,
	    SUM_ROWS_AFFECTED,
	    SUM_ROWS_SENT,
	    SUM_ROWS_EXAMINED,
	    SUM_CREATED_TMP_DISK_TABLES,
	    SUM_CREATED_TMP_TABLES,
	    SUM_SORT_MERGE_PASSES,
	    SUM_SORT_ROWS,
	    SUM_NO_INDEX_USED
	  FROM (
	    SELECT *
	    FROM performance_schema.events_statements_summary_by_digest
	    WHERE SCHEMA_NAME NOT IN ('mysql', 'performance_schema', 'information_schema')
	      AND LAST_SEEN > DATE_SUB(NOW(), INTERVAL {time_limit} SECOND)
	    ORDER BY LAST_SEEN DESC
	  )Q
	  GROUP BY
	    Q.SCHEMA_NAME,
	    Q.DIGEST,
	    Q.DIGEST_TEXT,
	    Q.COUNT_STAR,
	    Q.SUM_TIMER_WAIT,
	    Q.SUM_ERRORS,
	    Q.SUM_WARNINGS,
	    Q.SUM_ROWS_AFFECTED,
	    Q.SUM_ROWS_SENT,
	    Q.SUM_ROWS_EXAMINED,
	    Q.SUM_CREATED_TMP_DISK_TABLES,
	    Q.SUM_CREATED_TMP_TABLES,
	    Q.SUM_SORT_MERGE_PASSES,
	    Q.SUM_SORT_ROWS,
	    Q.SUM_NO_INDEX_USED
	  ORDER BY SUM_TIMER_WAIT DESC
	  LIMIT {limit}
	"""

PERF_EVENTS_STATEMENTS_QUERY_MYSQL = """
	SELECT
	    ifnull(SCHEMA_NAME, 'NONE') as SCHEMA_NAME,
	    DIGEST,
	    LEFT(DIGEST_TEXT, {digest_text_limit}) as DIGEST_TEXT,
	    COUNT_STAR,
	    SUM_TIMER_WAIT,
	    SUM_LOCK_TIME,
	    SUM_CPU_TIME,
	    SUM_ERRORS,
	    SUM_WARNINGS,
	    SUM_ROWS_AFFECTED,
	    SUM_ROWS_SENT,
	    SUM_ROWS_EXAMINED,
	    SUM_CREATED_TMP_DISK_TABLES,
	    SUM_CREATED_TMP_TABLES,
	    SUM_SORT_MERGE_PASSES,
	    SUM_SORT_ROWS,
	    SUM_NO_INDEX_USED,
	    QUANTILE_95,
	    QUANTILE_99,
	    QUANTILE_999
	  FROM (
	    SELECT *
	    FROM performance_schema.events_statements_summary_by_digest
	    WHERE SCHEMA_NAME NOT IN ('mysql', 'performance_schema', 'information_schema')
	      AND LAST_SEEN > DATE_SUB(NOW(), INTERVAL {time_limit} SECOND)
	    ORDER BY LAST_SEEN DESC
	  )Q
	  GROUP BY
	    Q.SCHEMA_NAME,
	    Q.DIGEST,
	    Q.DIGEST_TEXT,
	    Q.COUNT_STAR,
	    Q.SUM_TIMER_WAIT,
	    Q.SUM_LOCK_TIME,
	    Q.SUM_CPU_TIME,
	    Q.SUM_ERRORS,
	    Q.SUM_WARNINGS,
	    Q.SUM_ROWS_AFFECTED,
	    Q.SUM_ROWS_SENT,
	    Q.SUM_ROWS_EXAMINED,
	    Q.SUM_CREATED_TMP_DISK_TABLES,
	    Q.SUM_CREATED_TMP_TABLES,
	    Q.SUM_SORT_MERGE_PASSES,
	    Q.SUM_SORT_ROWS,
	    Q.SUM_NO_INDEX_USED,
	    Q.QUANTILE_95,
	    Q.QUANTILE_99,
	    Q.QUANTILE_999
	  ORDER BY SUM_TIMER_WAIT DESC
	  LIMIT {limit}
	"""

# MySQL from this version on reports lock time, CPU time and latency quantiles.
MYSQL_EXTENDED_DIGEST_VERSION = Version(8, 0, 28)

_LABELS = ("schema", "digest", "digest_text")


def _desc(name: str, help_text: str) -> Desc:
    return Desc(build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, name), help_text, _LABELS)


EVENTS_STATEMENTS_DESC = _desc(
    "events_statements_total", "The total count of events statements by digest.")
EVENTS_STATEMENTS_TIME_DESC = _desc(
    "events_statements_seconds_total", "The total time of events statements by digest.")
EVENTS_STATEMENTS_LOCK_TIME_DESC = _desc(
    "events_statements_lock_time_seconds_total",
    "The total lock time of events statements by digest.")
EVENTS_STATEMENTS_CPU_TIME_DESC = _desc(
    "events_statements_cpu_time_seconds_total",
    "The total cpu time of events statements by digest.")
EVENTS_STATEMENTS_ERRORS_DESC = _desc(
    "events_statements_errors_total", "The errors of events statements by digest.")
EVENTS_STATEMENTS_WARNINGS_DESC = _desc(
    "events_statements_warnings_total", "The warnings of events statements by digest.")
EVENTS_STATEMENTS_ROWS_AFFECTED_DESC = _desc(
    "events_statements_rows_affected_total",
    "The total rows affected of events statements by digest.")
EVENTS_STATEMENTS_ROWS_SENT_DESC = _desc(
    "events_statements_rows_sent_total", "The total rows sent of events statements by digest.")
EVENTS_STATEMENTS_ROWS_EXAMINED_DESC = _desc(
    "events_statements_rows_examined_total",
    "The total rows examined of events statements by digest.")
EVENTS_STATEMENTS_TMP_TABLES_DESC = _desc(
    "events_statements_tmp_tables_total", "The total tmp tables of events statements by digest.")
EVENTS_STATEMENTS_TMP_DISK_TABLES_DESC = _desc(
    "events_statements_tmp_disk_tables_total",
    "The total tmp disk tables of events statements by digest.")
EVENTS_STATEMENTS_SORT_MERGE_PASSES_DESC = _desc(
    "events_statements_sort_merge_passes_total",
    "The total number of merge passes by the sort algorithm performed by digest.")
EVENTS_STATEMENTS_SORT_ROWS_DESC = _desc(
    "events_statements_sort_rows_total", "The total number of sorted rows by digest.")
EVENTS_STATEMENTS_NO_INDEX_USED_DESC = _desc(
    "events_statements_no_index_used_total",
    "The total number of statements that used full table scans by digest.")
EVENTS_STATEMENTS_LATENCY_DESC = _desc(
    "events_statements_latency", "A summary of statement latency by digest")


@dataclass(frozen=True)
class ScrapePerfEventsStatements:
    """Collects from performance_schema.events_statements_summary_by_digest.

    ``limit`` caps the number of digests, ``time_limit`` is how old in
    seconds the last occurrence may be, and ``digest_text_limit`` is the
    maximum length of the normalized statement text.
    """

    limit: int = 250
    time_limit: int = 86400
    digest_text_limit: int = 120

    name: ClassVar[str] = "perf_schema.eventsstatements"
    help: ClassVar[str] = (
        "Collect metrics from performance_schema.events_statements_summary_by_digest"
    )
    version: ClassVar[float] = 5.6

    @staticmethod
    def _extended(instance: Instance) -> bool:
        return (
            instance.flavor == Flavor.MYSQL
            and instance.version >= MYSQL_EXTENDED_DIGEST_VERSION
        )

    def query(self, instance: Instance) -> str:
        """The digest query suited to the server, with the limits filled in."""
        template = (
            PERF_EVENTS_STATEMENTS_QUERY_MYSQL
            if self._extended(instance)
            else PERF_EVENTS_STATEMENTS_QUERY
        )
        return template.format(
            digest_text_limit=int(self.digest_text_limit),
            time_limit=int(self.time_limit),
            limit=int(self.limit),
        )

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield fourteen counters and a latency summary for every digest."""
        extended = self._extended(instance)
        for row in instance.query(self.query(instance)):
            lock_time = cpu_time = 0
            quantile95 = quantile99 = quantile999 = 0
            if extended:
                (schema, digest, digest_text, count, query_time, lock_time, cpu_time,
                 errors, warnings, rows_affected, rows_sent, rows_examined,
                 tmp_disk_tables, tmp_tables, sort_merge_passes, sort_rows,
                 no_index_used, quantile95, quantile99, quantile999) = row
            else:
                (schema, digest, digest_text, count, query_time,
                 errors, warnings, rows_affected, rows_sent, rows_examined,
                 tmp_disk_tables, tmp_tables, sort_merge_passes, sort_rows,
                 no_index_used) = row

            labels = (str(schema), str(digest), str(digest_text))
            count = int(count)
            seconds = float(int(query_time)) / PICO_SECONDS

            for desc, value in (
                (EVENTS_STATEMENTS_DESC, float(count)),
                (EVENTS_STATEMENTS_TIME_DESC, seconds),
                (EVENTS_STATEMENTS_LOCK_TIME_DESC, float(int(lock_time)) / PICO_SECONDS),
                (EVENTS_STATEMENTS_CPU_TIME_DESC, float(int(cpu_time)) / PICO_SECONDS),
                (EVENTS_STATEMENTS_ERRORS_DESC, float(int(errors))),
                (EVENTS_STATEMENTS_WARNINGS_DESC, float(int(warnings))),
                (EVENTS_STATEMENTS_ROWS_AFFECTED_DESC, float(int(rows_affected))),
                (EVENTS_STATEMENTS_ROWS_SENT_DESC, float(int(rows_sent))),
                (EVENTS_STATEMENTS_ROWS_EXAMINED_DESC, float(int(rows_examined))),
                (EVENTS_STATEMENTS_TMP_TABLES_DESC, float(int(tmp_tables))),
                (EVENTS_STATEMENTS_TMP_DISK_TABLES_DESC, float(int(tmp_disk_tables))),
                (EVENTS_STATEMENTS_SORT_MERGE_PASSES_DESC, float(int(sort_merge_passes))),
                (EVENTS_STATEMENTS_SORT_ROWS_DESC, float(int(sort_rows))),
                (EVENTS_STATEMENTS_NO_INDEX_USED_DESC, float(int(no_index_used))),
            ):
                yield const_metric(desc, ValueType.COUNTER, value, *labels)

            yield const_summary(
                EVENTS_STATEMENTS_LATENCY_DESC,
                count,
                seconds,
                {
                    95: float(int(quantile95)) / PICO_SECONDS,
                    99: float(int(quantile99)) / PICO_SECONDS,
                    999: float(int(quantile999)) / PICO_SECONDS,
                },
                *labels,
            )