"""Scrapers that turn MySQL and MariaDB server statistics into constant metrics."""

__version__ = "0.1.0"