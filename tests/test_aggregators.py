"""Tests for flat and grouped sample aggregation"""
import pytest

from metrics.aggregators import FlatAggregator, GroupedAggregator, SampleMismatch, create_aggregator
from metrics.models import EventKind, FamilyRecord, MetricType, Sample, label_key


def family(metric_type: MetricType, name: str = "lat") -> FamilyRecord:
    return FamilyRecord(name=name, metric_type=metric_type, help_text="help")


class TestAggregatorSelection:
    """Test the aggregation variant follows the metric type"""

    @pytest.mark.parametrize("metric_type,expected", [
        (MetricType.COUNTER, FlatAggregator),
        (MetricType.GAUGE, FlatAggregator),
        (MetricType.HISTOGRAM, GroupedAggregator),
        (MetricType.SUMMARY, GroupedAggregator),
    ])
    def test_create_aggregator(self, metric_type, expected):
        """Test each type maps to one variant"""
        assert isinstance(create_aggregator(family(metric_type)), expected)

    def test_label_key_ignores_order_and_discriminator(self):
        """Test grouping identity is a set without the discriminator"""
        a = (("le", "0.1"), ("job", "api"), ("env", "prod"))
        b = (("env", "prod"), ("job", "api"))

        assert label_key(a, "le") == label_key(b, "le")
        assert label_key(a) != label_key(b)


class TestFlatAggregator:
    """Test gauge and counter aggregation"""

    def setup_method(self):
        """Setup test fixtures"""
        self.family = family(MetricType.COUNTER, "req_total")
        self.aggregator = FlatAggregator(self.family)

    def test_observe_never_emits(self):
        """Test samples are held until the family ends"""
        events = self.aggregator.observe(Sample("req_total", (("method", "GET"),), 5.0))

        assert events == []

    def test_finish_keeps_input_order(self):
        """Test finish returns every sample in order"""
        samples = [
            Sample("req_total", (("method", "POST"),), 2.0),
            Sample("req_total", (("method", "GET"),), 5.0),
            Sample("req_total", (), 7.0),
        ]
        for sample in samples:
            self.aggregator.observe(sample)

        events = self.aggregator.finish()

        assert len(events) == 1
        assert events[0].kind == EventKind.SAMPLES
        assert events[0].samples == samples
        assert self.family.samples == 3
        assert self.aggregator.samples == []

    def test_finish_without_samples(self):
        """Test an empty family still finishes with no rows"""
        events = self.aggregator.finish()

        assert len(events) == 1
        assert events[0].samples == []

    def test_counter_total_suffix(self):
        """Test counters accept the _total series of their family"""
        aggregator = FlatAggregator(family(MetricType.COUNTER, "req"))

        aggregator.observe(Sample("req_total", (), 1.0))

        assert len(aggregator.samples) == 1

    def test_gauge_rejects_other_names(self):
        """Test samples of another metric are rejected"""
        aggregator = FlatAggregator(family(MetricType.GAUGE, "up"))

        with pytest.raises(SampleMismatch):
            aggregator.observe(Sample("up_total", (), 1.0))
        with pytest.raises(SampleMismatch):
            aggregator.observe(Sample("uptime", (), 1.0))


class TestHistogramAggregator:
    """Test histogram grouping"""

    def setup_method(self):
        """Setup test fixtures"""
        self.family = family(MetricType.HISTOGRAM)
        self.aggregator = GroupedAggregator(self.family)

    def observe_all(self, samples):
        events = []
        for sample in samples:
            events.extend(self.aggregator.observe(sample))
        return events

    def test_single_group(self):
        """Test buckets, sum and count fold into one closed group"""
        events = self.observe_all([
            Sample("lat_bucket", (("le", "0.1"),), 3.0),
            Sample("lat_bucket", (("le", "1"),), 5.0),
            Sample("lat_sum", (), 4.2),
        ])
        assert events == []

        events = self.aggregator.observe(Sample("lat_count", (), 5.0))

        assert len(events) == 1
        group = events[0].group
        assert events[0].kind == EventKind.GROUP
        assert group.pairs == [("0.1", 3.0), ("1", 5.0)]
        assert group.sum == 4.2
        assert group.count == 5.0
        assert group.labels == ()
        assert self.aggregator.group is None
        assert self.aggregator.finish() == []

    def test_groups_per_label_set(self):
        """Test each label set gets its own group"""
        events = self.observe_all([
            Sample("lat_bucket", (("job", "a"), ("le", "1")), 1.0),
            Sample("lat_sum", (("job", "a"),), 0.5),
            Sample("lat_count", (("job", "a"),), 1.0),
            Sample("lat_bucket", (("le", "1"), ("job", "b")), 2.0),
            Sample("lat_sum", (("job", "b"),), 1.5),
            Sample("lat_count", (("job", "b"),), 2.0),
        ])

        assert [e.group.labels for e in events] == [(("job", "a"),), (("job", "b"),)]
        assert [e.group.pairs for e in events] == [[("1", 1.0)], [("1", 2.0)]]

    def test_label_change_closes_open_group(self):
        """Test buckets from different label sets never merge"""
        events = self.observe_all([
            Sample("lat_bucket", (("job", "a"), ("le", "1")), 1.0),
            Sample("lat_bucket", (("job", "b"), ("le", "1")), 2.0),
            Sample("lat_bucket", (("job", "b"), ("le", "+Inf")), 3.0),
        ])

        assert len(events) == 1
        assert events[0].group.pairs == [("1", 1.0)]
        assert events[0].group.count is None
        assert self.aggregator.group.pairs == [("1", 2.0), ("+Inf", 3.0)]

    def test_label_change_on_count_closes_two_groups(self):
        """Test a count line for a new label set closes both groups"""
        events = self.observe_all([
            Sample("lat_bucket", (("job", "a"), ("le", "1")), 1.0),
            Sample("lat_count", (("job", "b"),), 4.0),
        ])

        assert len(events) == 2
        assert events[0].group.labels == (("job", "a"),)
        assert events[1].group.labels == (("job", "b"),)
        assert events[1].group.pairs == []

    def test_finish_emits_open_group(self):
        """Test a group without a count line is emitted at the boundary"""
        self.observe_all([
            Sample("lat_bucket", (("le", "1"),), 1.0),
            Sample("lat_sum", (), 0.3),
        ])

        events = self.aggregator.finish()

        assert len(events) == 1
        assert events[0].group.sum == 0.3
        assert events[0].group.count is None
        assert self.family.groups == 1
        assert self.aggregator.group is None

    def test_many_label_sets_hold_one_open_group(self):
        """Test closed groups are counted, not retained"""
        for job in range(200):
            labels = (("job", str(job)),)
            self.aggregator.observe(Sample("lat_bucket", labels + (("le", "1"),), 1.0))
            assert self.aggregator.group.labels == labels

        self.aggregator.finish()

        assert self.family.groups == 200
        assert self.aggregator.group is None

    def test_finish_without_samples(self):
        """Test an empty histogram emits no group"""
        assert self.aggregator.finish() == []

    def test_bucket_without_le(self):
        """Test bucket samples need an le label"""
        with pytest.raises(SampleMismatch):
            self.aggregator.observe(Sample("lat_bucket", (("job", "a"),), 1.0))

    @pytest.mark.parametrize("name", ["lat", "lat_total", "latency_count", "lat_created", "latsum"])
    def test_unrecognized_suffix(self, name):
        """Test only exact _bucket, _sum and _count series are accepted"""
        with pytest.raises(SampleMismatch):
            self.aggregator.observe(Sample(name, (("le", "1"),), 1.0))


class TestSummaryAggregator:
    """Test summary grouping"""

    def setup_method(self):
        """Setup test fixtures"""
        self.family = family(MetricType.SUMMARY, "rpc_seconds")
        self.aggregator = GroupedAggregator(self.family)

    def test_quantiles(self):
        """Test quantiles pair with their values in order"""
        events = []
        for sample in [
            Sample("rpc_seconds", (("quantile", "0.5"), ("svc", "x")), 0.01),
            Sample("rpc_seconds", (("svc", "x"), ("quantile", "0.99")), 0.2),
            Sample("rpc_seconds_sum", (("svc", "x"),), 12.5),
            Sample("rpc_seconds_count", (("svc", "x"),), 300.0),
        ]:
            events.extend(self.aggregator.observe(sample))

        assert len(events) == 1
        group = events[0].group
        assert group.pairs == [("0.5", 0.01), ("0.99", 0.2)]
        assert group.sum == 12.5
        assert group.count == 300.0
        assert group.labels == (("svc", "x"),)

    def test_quantile_label_required(self):
        """Test bare family samples need a quantile label"""
        with pytest.raises(SampleMismatch):
            self.aggregator.observe(Sample("rpc_seconds", (("svc", "x"),), 1.0))

    def test_summary_rejects_buckets(self):
        """Test histogram series are not part of a summary"""
        with pytest.raises(SampleMismatch):
            self.aggregator.observe(Sample("rpc_seconds_bucket", (("le", "1"),), 1.0))
