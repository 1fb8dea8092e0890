# mysqlscrape

Scrapers that read monitoring data from a MySQL or MariaDB server and turn it
into constant metrics: gauges, counters, histograms and summaries, named in the
`mysql_<subsystem>_<name>` style and carrying labels.

## Installation

```
pip install .
```

The package has no runtime dependencies. It works with any DB-API 2.0
connection whose driver uses `%s` placeholders (the `format` or `pyformat`
parameter style), as the common MySQL drivers do.

## Usage

Wrap a connection in an `Instance`. `Instance.from_connection` runs
`SELECT @@version`, parses the version and decides whether the server is MySQL
or MariaDB; if that fails the connection is closed and the error is raised.
Then run a scraper against the instance:

```python
from mysqlscrape.instance import Instance
from mysqlscrape.processlist import ScrapeProcesslist

with Instance.from_connection(connection) as instance:
    for metric in ScrapeProcesslist().scrape(instance):
        print(metric.desc.fq_name, metric.labels(), metric.value)
```

Every scraper has a `scrape(instance)` method that yields `Metric` objects from
`mysqlscrape.metrics`, and class attributes `name`, `help` and `version` (the
oldest server version the scraper is meant for). A query that fails raises the
driver's exception.

### Instance

`mysqlscrape.instance.Instance` holds the connection, its `flavor`
(`Flavor.MYSQL` or `Flavor.MARIADB`) and its `version` (a `Version` with
`major`, `minor` and `patch`). It offers:

- `query(sql, *args)`: all rows of a query;
- `query_row(sql, *args)`: the first row, or `LookupError` if there is none;
- `columns(sql, *args)`: the column names together with the rows;
- `ping()`: checks the connection, closing it and re-raising on failure;
- `close()`, and use as a context manager;
- `version_major_minor`: e.g. `8.0`.

`parse_version(text)` pulls the leading `major.minor.patch` out of a server
version string such as `10.5.17-MariaDB-1:10.5.17+maria~ubu2004-log`;
`query_version(connection)` asks the server and returns the parsed and the raw
version.

### Metrics

`mysqlscrape.metrics` defines `ValueType` (counter, gauge, untyped, histogram,
summary), `Desc` (full name, help text, label names) and `Metric`. A histogram
or summary `Metric` keeps the sum of observations in `value`, their number in
`count`, and its distribution in `buckets` or `quantiles`. The helpers
`build_fq_name`, `const_metric`, `const_histogram` and `const_summary` build
these; a wrong number of label values raises `ValueError`.

## Scrapers

| Module | Class | Source table | Options |
| --- | --- | --- | --- |
| `processlist` | `ScrapeProcesslist` | `information_schema.processlist` | `min_time=0`, `processes_by_user=True`, `processes_by_host=True` |
| `query_response_time` | `ScrapeQueryResponseTime` | `information_schema.query_response_time*` | |
| `schemastats` | `ScrapeSchemaStat` | `information_schema.table_statistics`, per schema | |
| `tablestats` | `ScrapeTableStat` | `information_schema.table_statistics`, per table | |
| `tables` | `ScrapeTableSchema` | `information_schema.tables` | `database_filter="*"` |
| `userstats` | `ScrapeUserStat` | `information_schema.user_statistics` | |
| `mysql_user` | `ScrapeUser` | `mysql.user` | `privileges=False` |
| `events_statements` | `ScrapePerfEventsStatements` | `performance_schema.events_statements_summary_by_digest` | `limit=250`, `time_limit=86400`, `digest_text_limit=120` |
| `file_instances` | `ScrapePerfFileInstances` | `performance_schema.file_summary_by_instance` | `filter=".*"`, `remove_prefix="/var/lib/mysql/"` |

Options are set when the scraper is constructed, e.g.
`ScrapeTableSchema(database_filter="shop,billing")`.

Notes on behaviour:

- `ScrapeProcesslist` sanitizes commands and states into label values
  (`sanitize_state`), reports an empty host as `unknown`, and yields results
  sorted by command and state, then by host, then by user.
- `ScrapeQueryResponseTime` yields nothing if `query_response_time_stats` is
  unavailable or off. It yields a cumulative histogram for the main table,
  whose failure is an error, and for the read and write tables when they exist.
- `ScrapeSchemaStat`, `ScrapeTableStat` and `ScrapeUserStat` yield nothing
  unless the server's `userstat` variable is on (`schemastats.userstat_enabled`).
  Unknown `user_statistics` columns are reported as untyped metrics.
- `ScrapeTableSchema` with `database_filter="*"` covers every database except
  `mysql`, `performance_schema`, `information_schema` and `sys`.
- `ScrapeUser` always yields the four connection and query limits; with
  `privileges=True` it also yields a 1/0 gauge for every `Y`/`N` privilege column.
- `ScrapePerfEventsStatements` uses the query with lock time, CPU time and
  latency quantiles on MySQL 8.0.28 and later, and the shorter query otherwise.
- Timer columns from `performance_schema` come in picoseconds and are reported
  in seconds.

Messages about features that are switched off go to the standard `logging`
module at debug level.

## What this package does not do

It only produces metric objects. It has no command line, no HTTP endpoint, no
exposition format output and no scheduling of scrapes; it does not open
database connections itself. The scrapers listed above are the only ones it
has.

## Tests

```
pip install ".[test]"
pytest
```