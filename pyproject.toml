[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mysqlscrape"
version = "0.1.0"
description = "Scrapers that turn MySQL and MariaDB server statistics into constant metrics."
requires-python = ">=3.10"
dependencies = []
keywords = ["mysql", "mariadb", "metrics", "monitoring", "performance_schema", "information_schema"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mysqlscrape"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
