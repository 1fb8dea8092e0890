"""Constant metric values and descriptors produced by the scrapers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping, Sequence

NAMESPACE = "mysql"
INFORMATION_SCHEMA = "info_schema"
PERFORMANCE_SCHEMA = "perf_schema"

# Performance schema timers are reported in picoseconds.
PICO_SECONDS = 1e12


class ValueType(enum.Enum):
    """Kind of a metric value."""

    COUNTER = "counter"
    GAUGE = "gauge"
    UNTYPED = "untyped"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"


_SCALAR_TYPES = frozenset({ValueType.COUNTER, ValueType.GAUGE, ValueType.UNTYPED})


@dataclass(frozen=True)
class Desc:
    """Describes a metric family: its full name, help text and label names."""

    fq_name: str
    help: str
    label_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_names", tuple(self.label_names or ()))


@dataclass
class Metric:
    """A single sample.

    For histograms and summaries ``value`` holds the sum of observations,
    ``count`` their number, and ``buckets`` or ``quantiles`` the distribution.
    """

    desc: Desc
    value_type: ValueType
    value: float
    label_values: tuple[str, ...] = ()
    count: int | None = None
    buckets: dict[float, int] = field(default_factory=dict)
    quantiles: dict[float, float] = field(default_factory=dict)

    def labels(self) -> dict[str, str]:
        """Return the label names mapped to their values."""
        return dict(zip(self.desc.label_names, self.label_values))


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts with underscores; an empty name gives ''."""
    if not name:
        return ""
    return "_".join(part for part in (namespace, subsystem, name) if part)


def _label_values(desc: Desc, values: Sequence[object]) -> tuple[str, ...]:
    if len(values) != len(desc.label_names):
        raise ValueError(
            f"{desc.fq_name}: expected {len(desc.label_names)} label values, got {len(values)}"
        )
    return tuple(str(v) for v in values)


def const_metric(desc: Desc, value_type: ValueType, value: float, *args: object) -> Metric:
    """Build a counter, gauge or untyped sample."""
    if value_type not in _SCALAR_TYPES:
        raise ValueError(f"{desc.fq_name}: {value_type.value} is not a scalar value type")
    return Metric(desc, value_type, float(value), _label_values(desc, args))


def const_histogram(
    desc: Desc, count: int, total: float, buckets: Mapping[float, int], *args: object
) -> Metric:
    """Build a histogram sample from cumulative bucket counts."""
    return Metric(
        desc,
        ValueType.HISTOGRAM,
        float(total),
        _label_values(desc, args),
        count=int(count),
        buckets=dict(buckets),
    )


def const_summary(
    desc: Desc, count: int, total: float, quantiles: Mapping[float, float], *args: object
) -> Metric:
    """Build a summary sample from precomputed quantiles."""
    return Metric(
        desc,
        ValueType.SUMMARY,
        float(total),
        _label_values(desc, args),
        count=int(count),
        quantiles=dict(quantiles),
    )