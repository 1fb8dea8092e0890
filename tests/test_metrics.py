import pytest

from mysqlscrape.metrics import (
    NAMESPACE,
    PERFORMANCE_SCHEMA,
    Desc,
    ValueType,
    build_fq_name,
    const_histogram,
    const_metric,
    const_summary,
)


def test_build_fq_name_joins_parts():
    assert build_fq_name(NAMESPACE, PERFORMANCE_SCHEMA, "events_waits_total") == (
        "mysql_perf_schema_events_waits_total"
    )


def test_build_fq_name_skips_empty_subsystem():
    assert build_fq_name("ns", "", "name") == "ns_name"


def test_build_fq_name_empty_name():
    assert build_fq_name("ns", "sub", "") == ""


def test_desc_label_names_become_tuple():
    desc = Desc("n", "h", ["a", "b"])
    assert desc.label_names == ("a", "b")


def test_const_metric_labels():
    desc = Desc("n", "h", ("a", "b"))
    metric = const_metric(desc, ValueType.GAUGE, 3, "x", "y")
    assert metric.labels() == {"a": "x", "b": "y"}
    assert metric.value == 3.0
    assert metric.value_type is ValueType.GAUGE


def test_const_metric_label_count_mismatch():
    desc = Desc("n", "h", ("a",))
    with pytest.raises(ValueError):
        const_metric(desc, ValueType.COUNTER, 1)


def test_const_metric_rejects_histogram_type():
    desc = Desc("n", "h")
    with pytest.raises(ValueError):
        const_metric(desc, ValueType.HISTOGRAM, 1)


def test_const_histogram_keeps_distribution():
    desc = Desc("n", "h")
    buckets = {0.1: 2, 1.0: 5}
    metric = const_histogram(desc, 5, 2.5, buckets)
    assert metric.value_type is ValueType.HISTOGRAM
    assert metric.count == 5
    assert metric.value == 2.5
    assert metric.buckets == buckets


def test_const_summary_keeps_quantiles():
    desc = Desc("n", "h", ("q",))
    quantiles = {95: 0.5, 99: 0.9}
    metric = const_summary(desc, 7, 1.25, quantiles, "v")
    assert metric.value_type is ValueType.SUMMARY
    assert metric.quantiles == quantiles
    assert metric.count == 7
    assert metric.labels() == {"q": "v"}