"""Per-file I/O counts from performance_schema.file_summary_by_instance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator

from .instance import Instance
from .metrics import (
    NAMESPACE,
    PERFORMANCE_SCHEMA,
    Desc,
    Metric,
    ValueType,
    build_fq_name,
    const_metric,
)

PERF_FILE_INSTANCES_QUERY = """
	SELECT
	    FILE_NAME, EVENT_NAME,
	    COUNT_READ, COUNT_WRITE,
	    SUM_NUMBER_OF_BYTES_READ, SUM_NUMBER_OF_BYTES_WRITE
	  FROM performance_schema.file_summary_by_instance
	     where FILE_NAME REGEXP %s
	"""

_LABELS = ("file_name", "event_name", "mode")

FILE_INSTANCES_BYTES_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "file_instances_bytes"),
    "The number of bytes processed by file read/write operations.",
    _LABELS,
)
FILE_INSTANCES_COUNT_DESC = Desc(
    build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "file_instances_total"),
    "The total number of file read/write operations.",
    _LABELS,
)


@dataclass(frozen=True)
class ScrapePerfFileInstances:
    """Collects from performance_schema.file_summary_by_instance.

    ``filter`` is a regular expression the file name must match;
    ``remove_prefix`` is stripped from the start of reported file names.
    """

    filter: str = ".*"
    remove_prefix: str = "/var/lib/mysql/"

    name: ClassVar[str] = "perf_schema.file_instances"
    help: ClassVar[str] = "Collect metrics from performance_schema.file_summary_by_instance"
    version: ClassVar[float] = 5.5

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield read and write operation counts and byte totals for every file."""
        for file_name, event_name, count_read, count_write, bytes_read, bytes_written in (
            instance.query(PERF_FILE_INSTANCES_QUERY, self.filter)
        ):
            file_name = str(file_name).removeprefix(self.remove_prefix)
            event_name = str(event_name)
            for desc, value, mode in (
                (FILE_INSTANCES_COUNT_DESC, count_read, "read"),
                (FILE_INSTANCES_COUNT_DESC, count_write, "write"),
                (FILE_INSTANCES_BYTES_DESC, bytes_read, "read"),
                (FILE_INSTANCES_BYTES_DESC, bytes_written, "write"),
            ):
                yield const_metric(
                    desc, ValueType.COUNTER, float(int(value)), file_name, event_name, mode
                )