"""Thread state counts from information_schema.processlist."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
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

INFO_SCHEMA_PROCESSLIST_QUERY = """
		  SELECT
		    user,
		    SUBSTRING_INDEX(host, ':', 1) AS host,
		    COALESCE(command, '') AS command,
		    COALESCE(state, '') AS state,
		    COUNT(*) AS processes,
		    SUM(time) AS seconds
		  FROM information_schema.processlist
		  WHERE ID != connection_id()
		    AND TIME >= {min_time}
		  GROUP BY user, host, command, state
	"""

PROCESSLIST_COUNT_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_threads"),
    "The number of threads split by current state.",
    ("command", "state"),
)
PROCESSLIST_TIME_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_seconds"),
    "The number of seconds threads have used split by current state.",
    ("command", "state"),
)
PROCESSES_BY_USER_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_processes_by_user"),
    "The number of processes by user.",
    ("mysql_user",),
)
PROCESSES_BY_HOST_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "processlist_processes_by_host"),
    "The number of processes by host.",
    ("client_host",),
)

_UINT32_MASK = 0xFFFFFFFF

_STATE_TABLE = str.maketrans({";": None, ",": None, ":": None, ".": None,
                              "(": None, ")": None, " ": "_", "-": "_"})


def sanitize_state(state: str) -> str:
    """Lower-case a command or state and make it usable as a label value."""
    return (state or "unknown").lower().translate(_STATE_TABLE)


@dataclass(frozen=True)
class ScrapeProcesslist:
    """Collects current thread state counts from information_schema.processlist."""

    min_time: int = 0
    processes_by_user: bool = True
    processes_by_host: bool = True

    name: ClassVar[str] = INFORMATION_SCHEMA + ".processlist"
    help: ClassVar[str] = "Collect current thread state counts from the information_schema.processlist"
    version: ClassVar[float] = 5.1

    def query(self) -> str:
        """The processlist query with the minimum time filled in."""
        return INFO_SCHEMA_PROCESSLIST_QUERY.format(min_time=int(self.min_time))

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield thread counts and times by command and state, then by host and user."""
        counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        times: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        by_host: dict[str, int] = defaultdict(int)
        by_user: dict[str, int] = defaultdict(int)

        for user, host, command, state, count, seconds in instance.query(self.query()):
            command = sanitize_state(command)
            state = sanitize_state(state)
            host = host or "unknown"
            user = str(user)
            count = int(count)
            seconds = int(seconds)
            counts[command][state] = (counts[command][state] + count) & _UINT32_MASK
            times[command][state] = (times[command][state] + seconds) & _UINT32_MASK
            by_host[host] = (by_host[host] + count) & _UINT32_MASK
            by_user[user] = (by_user[user] + count) & _UINT32_MASK

        for command in sorted(counts):
            for state in sorted(counts[command]):
                yield const_metric(PROCESSLIST_COUNT_DESC, ValueType.GAUGE,
                                   counts[command][state], command, state)
                yield const_metric(PROCESSLIST_TIME_DESC, ValueType.GAUGE,
                                   times[command][state], command, state)

        if self.processes_by_host:
            for host in sorted(by_host):
                yield const_metric(PROCESSES_BY_HOST_DESC, ValueType.GAUGE, by_host[host], host)
        if self.processes_by_user:
            for user in sorted(by_user):
                yield const_metric(PROCESSES_BY_USER_DESC, ValueType.GAUGE, by_user[user], user)