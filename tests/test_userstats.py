import pytest

from mysqlscrape.instance import Instance
from mysqlscrape.metrics import ValueType
from mysqlscrape.schemastats import USERSTAT_CHECK_QUERY
from mysqlscrape.userstats import USER_STAT_QUERY, ScrapeUserStat


class FakeCursor:
    def __init__(self, responses):
        self._responses = responses
        self.description = None
        self._rows = []

    def execute(self, sql, args=None):
        if sql not in self._responses:
            raise RuntimeError(f"unexpected query: {sql}")
        names, rows = self._responses[sql]
        self.description = [(name,) for name in names]
        self._rows = list(rows)

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, responses):
        self.responses = responses

    def cursor(self):
        return FakeCursor(self.responses)

    def close(self):
        pass


COLUMNS = [
    "USER", "TOTAL_CONNECTIONS", "CONCURRENT_CONNECTIONS", "CONNECTED_TIME", "BUSY_TIME",
    "CPU_TIME", "BYTES_RECEIVED", "BYTES_SENT", "BINLOG_BYTES_WRITTEN", "ROWS_READ",
    "ROWS_SENT", "ROWS_DELETED", "ROWS_INSERTED", "ROWS_UPDATED", "SELECT_COMMANDS",
    "UPDATE_COMMANDS", "OTHER_COMMANDS", "COMMIT_TRANSACTIONS", "ROLLBACK_TRANSACTIONS",
    "DENIED_CONNECTIONS", "LOST_CONNECTIONS", "ACCESS_DENIED", "EMPTY_QUERIES",
]
ROW = (
    "user_test", 1002, 0, 127027, 286, 245, float(2565104853), 21090856,
    float(2380108042), 767691, 1764, 8778, 1210741, 0, 1764, 1214416, 293, 2430888,
    0, 0, 0, 0, 0,
)

USERSTAT_ON = (["Variable_name", "Value"], [("userstat", "ON")])


def make_instance(responses):
    return Instance(FakeConnection(responses))


def test_scrape_user_stat():
    inst = make_instance({
        USERSTAT_CHECK_QUERY: USERSTAT_ON,
        USER_STAT_QUERY: (COLUMNS, [ROW]),
    })
    got = list(ScrapeUserStat().scrape(inst))
    C, G = ValueType.COUNTER, ValueType.GAUGE
    expected = [
        (1002, C), (0, G), (127027, C), (286, C), (245, C), (float(2565104853), C),
        (21090856, C), (float(2380108042), C), (767691, C), (1764, C), (8778, C),
        (1210741, C), (0, C), (1764, C), (1214416, C), (293, C), (2430888, C),
        (0, C), (0, C), (0, C), (0, C), (0, C),
    ]
    assert len(got) == len(expected)
    for metric, (value, value_type) in zip(got, expected):
        assert metric.labels() == {"user": "user_test"}
        assert metric.value == value
        assert metric.value_type is value_type


def test_metric_names_follow_columns():
    inst = make_instance({
        USERSTAT_CHECK_QUERY: USERSTAT_ON,
        USER_STAT_QUERY: (COLUMNS, [ROW]),
    })
    got = list(ScrapeUserStat().scrape(inst))
    assert got[0].desc.fq_name == "mysql_info_schema_user_statistics_total_connections"
    assert got[1].desc.fq_name == "mysql_info_schema_user_statistics_concurrent_connections"


def test_unknown_column_is_untyped():
    inst = make_instance({
        USERSTAT_CHECK_QUERY: USERSTAT_ON,
        USER_STAT_QUERY: (["USER", "NEW_THING"], [("alice", 7)]),
    })
    (metric,) = ScrapeUserStat().scrape(inst)
    assert metric.value_type is ValueType.UNTYPED
    assert metric.value == 7
    assert metric.desc.fq_name == "mysql_info_schema_user_statistics_new_thing"
    assert metric.desc.help == "Unsupported metric from column NEW_THING"
    assert metric.labels() == {"user": "alice"}


def test_userstat_off_yields_nothing():
    inst = make_instance({
        USERSTAT_CHECK_QUERY: (["Variable_name", "Value"], [("userstat", "OFF")]),
        USER_STAT_QUERY: (COLUMNS, [ROW]),
    })
    assert list(ScrapeUserStat().scrape(inst)) == []


def test_userstat_unavailable_yields_nothing():
    inst = make_instance({USER_STAT_QUERY: (COLUMNS, [ROW])})
    assert list(ScrapeUserStat().scrape(inst)) == []


def test_failing_statistics_query_raises():
    inst = make_instance({USERSTAT_CHECK_QUERY: USERSTAT_ON})
    with pytest.raises(RuntimeError):
        list(ScrapeUserStat().scrape(inst))


def test_non_numeric_value_raises():
    inst = make_instance({
        USERSTAT_CHECK_QUERY: USERSTAT_ON,
        USER_STAT_QUERY: (["USER", "BUSY_TIME"], [("alice", "lots")]),
    })
    with pytest.raises(ValueError):
        list(ScrapeUserStat().scrape(inst))