"""Format family events into styled report lines"""
from typing import List, Optional

from rich.text import Text

from metrics.models import AggregationGroup, EventKind, FamilyEvent, FamilyRecord, LabelSet, Sample, to_f32
from . import styling
from .styling import style


INDENT = "  "


def format_value(value: Optional[float]) -> str:
    """Shortest text that reads back as the same single-precision value"""
    if value is None:
        return "-"
    value = to_f32(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    for precision in range(1, 9):
        text = f"{value:.{precision}g}"
        if to_f32(float(text)) == value:
            return text
    return f"{value:.9g}"


def _styled_value(value: Optional[float]) -> Text:
    if value is None:
        return style(format_value(value), *styling.MISSING)
    return style(format_value(value), *styling.VALUE)


def render_labels(labels: LabelSet) -> Text:
    """'key: value ' for every label, in source order"""
    text = Text()
    for key, value in labels:
        text.append_text(style(key, *styling.LABEL_KEY))
        text.append(": ")
        text.append_text(style(value, *styling.LABEL_VALUE))
        text.append(" ")
    return text


def render_header(family: FamilyRecord) -> Text:
    """'<name> <type> "<help>"'"""
    return Text.assemble(
        style(family.name, *styling.METRIC_NAME),
        " ",
        style(family.metric_type.value, *styling.METRIC_TYPE),
        f' "{family.help_text}"',
    )


def render_sample(sample: Sample) -> Text:
    text = Text(INDENT)
    text.append_text(style(format_value(sample.value), *styling.VALUE))
    text.append("\t")
    text.append_text(render_labels(sample.labels))
    return text


def render_samples(samples: List[Sample], sort_by_value: bool = False) -> List[Text]:
    """One row per sample; input order unless sorting by value"""
    if sort_by_value:
        samples = sorted(samples, key=lambda s: s.value, reverse=True)
    return [render_sample(sample) for sample in samples]


def render_group(group: AggregationGroup) -> Text:
    """One row with sum, count, every bucket or quantile, and the group labels"""
    text = Text(INDENT)
    text.append("sum=")
    text.append_text(_styled_value(group.sum))
    text.append(" count=")
    text.append_text(_styled_value(group.count))
    text.append("\t")
    for index, (key, value) in enumerate(group.pairs):
        if index:
            text.append(" ")
        text.append_text(style(key, *styling.PAIR_KEY))
        text.append("→")
        text.append(format_value(value))
    if group.labels:
        text.append("\t")
        text.append_text(render_labels(group.labels))
    return text


def render_event(event: FamilyEvent, sort_by_value: bool = False) -> List[Text]:
    """Lines to print for one family event"""
    if event.kind == EventKind.HEADER:
        return [render_header(event.family)]
    if event.kind == EventKind.SAMPLES:
        return render_samples(event.samples, sort_by_value)
    return [render_group(event.group)]
