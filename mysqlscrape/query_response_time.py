"""Query response time distribution from information_schema.query_response_time*."""

from __future__ import annotations

import logging
from typing import ClassVar, Iterator

from .instance import Instance
from .metrics import (
    INFORMATION_SCHEMA,
    NAMESPACE,
    Desc,
    Metric,
    build_fq_name,
    const_histogram,
)

log = logging.getLogger(__name__)

QUERY_RESPONSE_CHECK_QUERY = "SELECT @@query_response_time_stats"

# Upper-case table names: otherwise the read/write split returns the totals.
QUERY_RESPONSE_TIME_QUERIES = (
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME",
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME_READ",
    "SELECT TIME, COUNT, TOTAL FROM INFORMATION_SCHEMA.QUERY_RESPONSE_TIME_WRITE",
)

QUERY_RESPONSE_TIME_DESCS = (
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "query_response_time_seconds"),
        "The number of all queries by duration they took to execute.",
    ),
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "read_query_response_time_seconds"),
        "The number of read queries by duration they took to execute.",
    ),
    Desc(
        build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "write_query_response_time_seconds"),
        "The number of write queries by duration they took to execute.",
    ),
)


def _parse_float(raw: object) -> float:
    try:
        return float(str(raw).strip())
    except ValueError:
        return 0.0


def process_response_time_table(instance: Instance, query: str, index: int) -> Metric:
    """Read one response time table into a cumulative histogram."""
    count_total = 0
    sum_total = 0.0
    buckets: dict[float, int] = {}
    for raw_length, count, raw_total in instance.query(query):
        length = _parse_float(raw_length)
        count_total += int(count)
        sum_total += _parse_float(raw_total)
        # The "TOO LONG" row only contributes to the count and sum.
        if length == 0:
            continue
        buckets[length] = count_total
    return const_histogram(QUERY_RESPONSE_TIME_DESCS[index], count_total, sum_total, buckets)


class ScrapeQueryResponseTime:
    """Collects query response time histograms when query_response_time_stats is on."""

    name: ClassVar[str] = "info_schema.query_response_time"
    help: ClassVar[str] = "Collect query response time distribution if query_response_time_stats is ON."
    version: ClassVar[float] = 5.5

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield one histogram per available table.

        Only a failure of the main table is an error; the read and write
        tables exist on some servers only.
        """
        try:
            enabled = int(instance.query_row(QUERY_RESPONSE_CHECK_QUERY)[0])
        except Exception:
            log.debug("Query response time distribution is not available.")
            return
        if enabled == 0:
            log.debug("MySQL variable is OFF: query_response_time_stats")
            return

        for index, query in enumerate(QUERY_RESPONSE_TIME_QUERIES):
            try:
                metric = process_response_time_table(instance, query, index)
            except Exception:
                if index == 0:
                    raise
                continue
            yield metric