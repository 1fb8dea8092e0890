import pytest

from mysqlscrape.instance import Instance
from mysqlscrape.metrics import ValueType
from mysqlscrape.schemastats import USERSTAT_CHECK_QUERY
from mysqlscrape.tablestats import (
    TABLE_STAT_QUERY,
    TABLE_STATS_ROWS_CHANGED_DESC,
    TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC,
    TABLE_STATS_ROWS_READ_DESC,
    ScrapeTableStat,
)


def _normalize(sql):
    return " ".join(sql.split())


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self._rows = []

    def execute(self, sql, args=None):
        self.connection.executed.append((_normalize(sql), args))
        expected_sql, columns, result = self.connection.expectations.pop(0)
        assert _normalize(sql) == _normalize(expected_sql)
        if isinstance(result, Exception):
            raise result
        self.description = [(name, None, None, None, None, None, None) for name in columns]
        self._rows = list(result)

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *expectations):
        self.expectations = list(expectations)
        self.executed = []

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        pass


USERSTAT_ON = (USERSTAT_CHECK_QUERY, ["Variable_name", "Value"], [("userstat", "ON")])
COLUMNS = ["TABLE_SCHEMA", "TABLE_NAME", "ROWS_READ", "ROWS_CHANGED", "ROWS_CHANGED_X_INDEXES"]


def test_scrape_table_stat():
    rows = [
        ("mysql", "db", 238, 0, 8),
        ("mysql", "proxies_priv", 99, 1, 0),
        ("mysql", "user", 1064, 2, 5),
    ]
    conn = FakeConnection(USERSTAT_ON, (TABLE_STAT_QUERY, COLUMNS, rows))
    metrics = list(ScrapeTableStat().scrape(Instance(conn)))

    expected = [
        ({"schema": "mysql", "table": "db"}, 238),
        ({"schema": "mysql", "table": "db"}, 0),
        ({"schema": "mysql", "table": "db"}, 8),
        ({"schema": "mysql", "table": "proxies_priv"}, 99),
        ({"schema": "mysql", "table": "proxies_priv"}, 1),
        ({"schema": "mysql", "table": "proxies_priv"}, 0),
        ({"schema": "mysql", "table": "user"}, 1064),
        ({"schema": "mysql", "table": "user"}, 2),
        ({"schema": "mysql", "table": "user"}, 5),
    ]
    assert [(m.labels(), m.value) for m in metrics] == expected
    assert all(m.value_type is ValueType.COUNTER for m in metrics)
    assert conn.expectations == []


def test_descriptor_order():
    conn = FakeConnection(USERSTAT_ON, (TABLE_STAT_QUERY, COLUMNS, [("mysql", "db", 238, 0, 8)]))
    metrics = list(ScrapeTableStat().scrape(Instance(conn)))
    assert [m.desc for m in metrics] == [
        TABLE_STATS_ROWS_READ_DESC,
        TABLE_STATS_ROWS_CHANGED_DESC,
        TABLE_STATS_ROWS_CHANGED_X_INDEXES_DESC,
    ]


def test_userstat_off_yields_nothing():
    conn = FakeConnection((USERSTAT_CHECK_QUERY, ["Variable_name", "Value"], [("userstat", "OFF")]))
    assert list(ScrapeTableStat().scrape(Instance(conn))) == []
    assert len(conn.executed) == 1


def test_stats_query_error_is_raised():
    conn = FakeConnection(USERSTAT_ON, (TABLE_STAT_QUERY, [], RuntimeError("boom")))
    with pytest.raises(RuntimeError, match="boom"):
        list(ScrapeTableStat().scrape(Instance(conn)))