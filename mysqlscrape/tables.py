"""Table versions, row counts and sizes from information_schema.tables."""

from __future__ import annotations

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

TABLE_SCHEMA_QUERY = """
		SELECT
		    TABLE_SCHEMA,
		    TABLE_NAME,
		    TABLE_TYPE,
		    ifnull(ENGINE, 'NONE') as ENGINE,
		    ifnull(VERSION, '0') as VERSION,
		    ifnull(ROW_FORMAT, 'NONE') as ROW_FORMAT,
		    ifnull(TABLE_ROWS, '0') as TABLE_ROWS,
		    ifnull(DATA_LENGTH, '0') as DATA_LENGTH,
		    ifnull(INDEX_LENGTH, '0') as INDEX_LENGTH,
		    ifnull(DATA_FREE, '0') as DATA_FREE,
		    ifnull(CREATE_OPTIONS, 'NONE') as CREATE_OPTIONS
		  FROM information_schema.tables
		  WHERE TABLE_SCHEMA = %s
		"""

DB_LIST_QUERY = """
		SELECT
		    SCHEMA_NAME
		  FROM information_schema.schemata
		  WHERE SCHEMA_NAME NOT IN ('mysql', 'performance_schema', 'information_schema', 'sys')
		"""

TABLES_VERSION_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_version"),
    "The version number of the table's .frm file",
    ("schema", "table", "type", "engine", "row_format", "create_options"),
)
TABLES_ROWS_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_rows"),
    "The estimated number of rows in the table from information_schema.tables",
    ("schema", "table"),
)
TABLES_SIZE_DESC = Desc(
    build_fq_name(NAMESPACE, INFORMATION_SCHEMA, "table_size"),
    "The size of the table components from information_schema.tables",
    ("schema", "table", "component"),
)


@dataclass(frozen=True)
class ScrapeTableSchema:
    """Collects metrics from information_schema.tables.

    ``database_filter`` is a comma-separated list of databases, or ``*`` for
    every database except the system ones.
    """

    database_filter: str = "*"

    name: ClassVar[str] = INFORMATION_SCHEMA + ".tables"
    help: ClassVar[str] = "Collect metrics from information_schema.tables"
    version: ClassVar[float] = 5.1

    def databases(self, instance: Instance) -> list[str]:
        """The databases to collect table stats for."""
        if self.database_filter == "*":
            return [str(row[0]) for row in instance.query(DB_LIST_QUERY)]
        return self.database_filter.split(",")

    def scrape(self, instance: Instance) -> Iterator[Metric]:
        """Yield version, row count and component sizes for every table."""
        for database in self.databases(instance):
            for (
                schema,
                table,
                table_type,
                engine,
                version,
                row_format,
                table_rows,
                data_length,
                index_length,
                data_free,
                create_options,
            ) in instance.query(TABLE_SCHEMA_QUERY, database):
                schema, table = str(schema), str(table)
                yield const_metric(
                    TABLES_VERSION_DESC,
                    ValueType.GAUGE,
                    float(int(version)),
                    schema,
                    table,
                    str(table_type),
                    str(engine),
                    str(row_format),
                    str(create_options),
                )
                yield const_metric(
                    TABLES_ROWS_DESC, ValueType.GAUGE, float(int(table_rows)), schema, table
                )
                for component, size in (
                    ("data_length", data_length),
                    ("index_length", index_length),
                    ("data_free", data_free),
                ):
                    yield const_metric(
                        TABLES_SIZE_DESC, ValueType.GAUGE, float(int(size)), schema, table, component
                    )