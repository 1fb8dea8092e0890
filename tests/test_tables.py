import pytest

from mysqlscrape.instance import Instance
from mysqlscrape.metrics import ValueType
from mysqlscrape.tables import (
    DB_LIST_QUERY,
    TABLE_SCHEMA_QUERY,
    TABLES_ROWS_DESC,
    TABLES_SIZE_DESC,
    TABLES_VERSION_DESC,
    ScrapeTableSchema,
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


TABLE_COLUMNS = [
    "TABLE_SCHEMA", "TABLE_NAME", "TABLE_TYPE", "ENGINE", "VERSION", "ROW_FORMAT",
    "TABLE_ROWS", "DATA_LENGTH", "INDEX_LENGTH", "DATA_FREE", "CREATE_OPTIONS",
]
ROW = ("shop", "orders", "BASE TABLE", "InnoDB", 10, "Dynamic", 42, 16384, 2048, 512, "NONE")


def test_all_databases_are_listed_then_scraped():
    conn = FakeConnection(
        (DB_LIST_QUERY, ["SCHEMA_NAME"], [("shop",)]),
        (TABLE_SCHEMA_QUERY, TABLE_COLUMNS, [ROW]),
    )
    metrics = list(ScrapeTableSchema().scrape(Instance(conn)))

    assert [m.desc for m in metrics] == [
        TABLES_VERSION_DESC,
        TABLES_ROWS_DESC,
        TABLES_SIZE_DESC,
        TABLES_SIZE_DESC,
        TABLES_SIZE_DESC,
    ]
    assert metrics[0].labels() == {
        "schema": "shop",
        "table": "orders",
        "type": "BASE TABLE",
        "engine": "InnoDB",
        "row_format": "Dynamic",
        "create_options": "NONE",
    }
    assert metrics[0].value == ROW[4]
    assert metrics[1].labels() == {"schema": "shop", "table": "orders"}
    assert metrics[1].value == ROW[6]
    assert [(m.labels()["component"], m.value) for m in metrics[2:]] == [
        ("data_length", ROW[7]),
        ("index_length", ROW[8]),
        ("data_free", ROW[9]),
    ]
    assert all(m.value_type is ValueType.GAUGE for m in metrics)
    assert conn.executed[1][1] == ("shop",)


def test_explicit_database_list_skips_listing():
    conn = FakeConnection(
        (TABLE_SCHEMA_QUERY, TABLE_COLUMNS, []),
        (TABLE_SCHEMA_QUERY, TABLE_COLUMNS, [ROW]),
    )
    metrics = list(ScrapeTableSchema(database_filter="db1,shop").scrape(Instance(conn)))
    assert [args for _, args in conn.executed] == [("db1",), ("shop",)]
    assert len(metrics) == 5
    assert conn.expectations == []


def test_databases_splits_filter():
    scraper = ScrapeTableSchema(database_filter="a,b,c")
    assert scraper.databases(Instance(FakeConnection())) == ["a", "b", "c"]


def test_databases_queries_server_for_star():
    conn = FakeConnection((DB_LIST_QUERY, ["SCHEMA_NAME"], [("one",), ("two",)]))
    assert ScrapeTableSchema().databases(Instance(conn)) == ["one", "two"]


def test_database_list_error_is_raised():
    conn = FakeConnection((DB_LIST_QUERY, [], RuntimeError("denied")))
    with pytest.raises(RuntimeError, match="denied"):
        list(ScrapeTableSchema().scrape(Instance(conn)))