"""Metric family data models for exposition parsing and rendering"""
from dataclasses import dataclass, field
from enum import Enum
import math
import struct
from typing import FrozenSet, List, Optional, Tuple


Label = Tuple[str, str]
LabelSet = Tuple[Label, ...]


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"

    @property
    def is_grouped(self) -> bool:
        """Histogram and summary samples aggregate into groups"""
        return self in (MetricType.HISTOGRAM, MetricType.SUMMARY)

    @property
    def discriminator(self) -> Optional[str]:
        """Label that varies inside one group"""
        if self == MetricType.HISTOGRAM:
            return "le"
        if self == MetricType.SUMMARY:
            return "quantile"
        return None


def to_f32(value: float) -> float:
    """Round a double to the nearest single-precision value"""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def label_key(labels: LabelSet, discriminator: Optional[str] = None) -> FrozenSet[Label]:
    """Order-independent identity of a label set, ignoring the discriminator"""
    return frozenset((k, v) for k, v in labels if k != discriminator)


def without_label(labels: LabelSet, key: Optional[str]) -> LabelSet:
    """Drop every pair with the given key, keeping source order"""
    return tuple((k, v) for k, v in labels if k != key)


def get_label(labels: LabelSet, key: str) -> Optional[str]:
    """Value of the first pair with the given key"""
    for k, v in labels:
        if k == key:
            return v
    return None


@dataclass(frozen=True)
class Sample:
    """A single parsed sample line"""
    name: str
    labels: LabelSet
    value: float


@dataclass
class AggregationGroup:
    """Buckets or quantiles sharing one non-discriminator label set"""
    labels: LabelSet = ()
    pairs: List[Tuple[str, float]] = field(default_factory=list)
    sum: Optional[float] = None
    count: Optional[float] = None


@dataclass
class FamilyRecord:
    """One HELP/TYPE block and how many rows it rendered"""
    name: str
    metric_type: MetricType
    help_text: str
    samples: int = 0
    groups: int = 0


class EventKind(Enum):
    """Render units produced while a family is consumed"""
    HEADER = "header"
    SAMPLES = "samples"
    GROUP = "group"


@dataclass
class FamilyEvent:
    """Something the renderer can draw right away"""
    kind: EventKind
    family: FamilyRecord
    samples: List[Sample] = field(default_factory=list)
    group: Optional[AggregationGroup] = None
