"""Per-family sample aggregation

Two closed variants exist: FlatAggregator for gauges and counters, which keeps
every sample as-is, and GroupedAggregator for histograms and summaries, which
folds bucket/quantile, _sum and _count lines into one row per label set.
"""
from typing import List, Optional, Union

from logging_config import get_logger
from .models import (
    AggregationGroup,
    EventKind,
    FamilyEvent,
    FamilyRecord,
    MetricType,
    Sample,
    get_label,
    label_key,
    without_label,
)


logger = get_logger(__name__)


class SampleMismatch(ValueError):
    """Sample name or labels do not fit the family"""


class FlatAggregator:
    """Collects gauge and counter samples in input order"""

    def __init__(self, family: FamilyRecord):
        self.family = family
        self.samples: List[Sample] = []

    def accepts(self, name: str) -> bool:
        if name == self.family.name:
            return True
        return self.family.metric_type == MetricType.COUNTER and name == f"{self.family.name}_total"

    def observe(self, sample: Sample) -> List[FamilyEvent]:
        """Record one sample; flat families never close early"""
        if not self.accepts(sample.name):
            raise SampleMismatch(f"sample {sample.name!r} does not belong to family {self.family.name!r}")
        self.samples.append(sample)
        return []

    def finish(self) -> List[FamilyEvent]:
        """Emit every collected sample at the family boundary"""
        self.family.samples += len(self.samples)
        event = FamilyEvent(kind=EventKind.SAMPLES, family=self.family, samples=list(self.samples))
        self.samples = []
        return [event]


class GroupedAggregator:
    """Folds histogram buckets or summary quantiles into groups"""

    def __init__(self, family: FamilyRecord):
        self.family = family
        self.discriminator = family.metric_type.discriminator
        self.group: Optional[AggregationGroup] = None
        self._group_key = None

    def _classify(self, sample: Sample) -> str:
        name = self.family.name
        if self.family.metric_type == MetricType.SUMMARY and sample.name == name:
            if get_label(sample.labels, "quantile") is None:
                raise SampleMismatch(f"summary sample {sample.name!r} has no quantile label")
            return "pair"
        if self.family.metric_type == MetricType.HISTOGRAM and sample.name == f"{name}_bucket":
            if get_label(sample.labels, "le") is None:
                raise SampleMismatch(f"histogram bucket {sample.name!r} has no le label")
            return "pair"
        if sample.name == f"{name}_sum":
            return "sum"
        if sample.name == f"{name}_count":
            return "count"
        raise SampleMismatch(
            f"sample {sample.name!r} is not a {self.family.metric_type.value} series of {name!r}"
        )

    def _close(self) -> FamilyEvent:
        group = self.group
        self.group = None
        self._group_key = None
        self.family.groups += 1
        logger.debug(
            "Group closed",
            family=self.family.name,
            pairs=len(group.pairs),
            labels=dict(group.labels),
        )
        return FamilyEvent(kind=EventKind.GROUP, family=self.family, group=group)

    def observe(self, sample: Sample) -> List[FamilyEvent]:
        """Add one sample, returning events for any groups it closed"""
        kind = self._classify(sample)
        key = label_key(sample.labels, self.discriminator)
        events: List[FamilyEvent] = []

        if self.group is not None and key != self._group_key:
            events.append(self._close())
        if self.group is None:
            self.group = AggregationGroup()
            self._group_key = key

        self.group.labels = without_label(sample.labels, self.discriminator)
        if kind == "pair":
            self.group.pairs.append((get_label(sample.labels, self.discriminator), sample.value))
        elif kind == "sum":
            self.group.sum = sample.value
        else:
            self.group.count = sample.value
            events.append(self._close())
        return events

    def finish(self) -> List[FamilyEvent]:
        """Emit the group still open at the family boundary, if any"""
        if self.group is None:
            return []
        return [self._close()]


Aggregator = Union[FlatAggregator, GroupedAggregator]


def create_aggregator(family: FamilyRecord) -> Aggregator:
    """Pick the aggregation variant for a family's metric type"""
    if family.metric_type.is_grouped:
        return GroupedAggregator(family)
    return FlatAggregator(family)
