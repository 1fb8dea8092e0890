"""A connection to a MySQL-compatible server together with its detected version."""

from __future__ import annotations

import enum
import re
from contextlib import suppress
from dataclasses import dataclass
from typing import Any


class Flavor(str, enum.Enum):
    """Server family."""

    MYSQL = "mysql"
    MARIADB = "mariadb"


_TOLERANT_VERSION = re.compile(r"v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[-+].*)?")

# "10.5.17-MariaDB-1:10.5.17+maria~ubu2004-log" or "8.0.36-28.1"
_SERVER_VERSION = re.compile(r"^((\d+)(\.\d+)(\.\d+))")


@dataclass(frozen=True, order=True)
class Version:
    """A major.minor.patch version number."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version leniently: missing parts default to zero."""
        match = _TOLERANT_VERSION.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"could not parse version from {text!r}")
        return cls(*(int(part) if part else 0 for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> Version:
    """Extract the leading version number from a server version string."""
    match = _SERVER_VERSION.match(text)
    if match is None:
        raise ValueError(f"could not parse version from {text!r}")
    return Version.parse(match.group(1))


def _execute(connection: Any, sql: str, args: tuple) -> tuple[list[str], list[tuple]]:
    cursor = connection.cursor()
    try:
        if args:
            cursor.execute(sql, args)
        else:
            cursor.execute(sql)
        names = [column[0] for column in cursor.description or ()]
        return names, [tuple(row) for row in cursor.fetchall()]
    finally:
        cursor.close()


def query_version(connection: Any) -> tuple[Version, str]:
    """Ask the server for its version; return the parsed and the raw string."""
    _, rows = _execute(connection, "SELECT @@version;", ())
    if not rows:
        raise LookupError("server returned no version")
    text = str(rows[0][0])
    return parse_version(text), text


class Instance:
    """A DB-API connection plus the server's flavor and version."""

    def __init__(
        self,
        connection: Any,
        flavor: Flavor | None = None,
        version: Version = Version(),
    ) -> None:
        self.connection = connection
        self.flavor = flavor
        self.version = version

    @classmethod
    def from_connection(cls, connection: Any) -> "Instance":
        """Detect version and flavor; the connection is closed if that fails."""
        try:
            version, text = query_version(connection)
        except Exception:
            with suppress(Exception):
                connection.close()
            raise
        flavor = Flavor.MARIADB if "mariadb" in text.lower() else Flavor.MYSQL
        return cls(connection, flavor, version)

    @property
    def version_major_minor(self) -> float:
        """The major and minor version as a float, e.g. 8.0."""
        return float(f"{self.version.major}.{self.version.minor}")

    def query(self, sql: str, *args: Any) -> list[tuple]:
        """Run a query and return all of its rows."""
        return _execute(self.connection, sql, args)[1]

    def query_row(self, sql: str, *args: Any) -> tuple:
        """Run a query and return its first row; LookupError if there is none."""
        rows = self.query(sql, *args)
        if not rows:
            raise LookupError("query returned no rows")
        return rows[0]

    def columns(self, sql: str, *args: Any) -> tuple[list[str], list[tuple]]:
        """Run a query and return its column names together with its rows."""
        return _execute(self.connection, sql, args)

    def ping(self) -> None:
        """Check the connection; close it and re-raise if the check fails."""
        try:
            ping = getattr(self.connection, "ping", None)
            if callable(ping):
                ping()
            else:
                self.query("SELECT 1")
        except Exception:
            with suppress(Exception):
                self.close()
            raise

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()

    def __enter__(self) -> "Instance":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()