"""Parsers for single HELP, TYPE and sample lines"""
from typing import List, Tuple

from metrics.models import Label, LabelSet, MetricType, Sample
from .errors import UnknownMetricTypeError
from .grammar import (
    expect_end,
    expect_literal,
    parse_alpha,
    parse_identifier,
    parse_number,
    parse_quoted_value,
    parse_rest_of_line,
)


HELP_PREFIX = "# HELP "
TYPE_PREFIX = "# TYPE "

METRIC_TYPES = {metric_type.value: metric_type for metric_type in MetricType}


def parse_help_line(line: str) -> Tuple[str, str]:
    """Parse '# HELP <name> <text>' into (name, help text)"""
    pos = expect_literal(line, 0, HELP_PREFIX)
    name, pos = parse_identifier(line, pos)
    pos = expect_literal(line, pos, " ")
    help_text, pos = parse_rest_of_line(line, pos)
    expect_end(line, pos)
    return name, help_text


def parse_type_line(line: str) -> Tuple[str, MetricType]:
    """Parse '# TYPE <name> <type>' into (name, MetricType)"""
    pos = expect_literal(line, 0, TYPE_PREFIX)
    name, pos = parse_identifier(line, pos)
    pos = expect_literal(line, pos, " ")
    type_start = pos
    token, pos = parse_alpha(line, pos)
    expect_end(line, pos)

    metric_type = METRIC_TYPES.get(token)
    if metric_type is None:
        raise UnknownMetricTypeError(f"unknown metric type {token!r}", line, type_start)
    return name, metric_type


def _parse_label(line: str, pos: int) -> Tuple[Label, int]:
    key, pos = parse_identifier(line, pos)
    pos = expect_literal(line, pos, "=")
    value, pos = parse_quoted_value(line, pos)
    return (key, value), pos


def parse_label_block(line: str, pos: int) -> Tuple[LabelSet, int]:
    """Parse '{k="v",...}' holding at least one pair"""
    pos = expect_literal(line, pos, "{")
    labels: List[Label] = []
    label, pos = _parse_label(line, pos)
    labels.append(label)
    while line.startswith(",", pos):
        label, pos = _parse_label(line, pos + 1)
        labels.append(label)
    pos = expect_literal(line, pos, "}")
    return tuple(labels), pos


def parse_sample_line(line: str) -> Sample:
    """Parse '<name>[{labels}] <value>' into a Sample"""
    name, pos = parse_identifier(line, 0)
    labels: LabelSet = ()
    if line.startswith("{", pos):
        labels, pos = parse_label_block(line, pos)
    pos = expect_literal(line, pos, " ")
    value, pos = parse_number(line, pos)
    expect_end(line, pos)
    return Sample(name=name, labels=labels, value=value)

