"""Family-at-a-time state machine over an exposition line stream"""
from enum import Enum
from typing import Generator, Iterable, Iterator, Optional

from logging_config import get_logger, log_family_parsed
from metrics.aggregators import SampleMismatch, create_aggregator
from metrics.models import EventKind, FamilyEvent, FamilyRecord
from .errors import (
    FamilyMismatchError,
    HelpLineError,
    InputReadError,
    LineParseError,
    TypeLineError,
    UnexpectedSampleError,
)
from .lines import parse_help_line, parse_sample_line, parse_type_line


logger = get_logger(__name__)


class State(Enum):
    """Where the machine is within the current family"""
    AWAIT_HELP = "await_help"
    AWAIT_TYPE = "await_type"
    CONSUMING_SAMPLES = "consuming_samples"
    FAMILY_CLOSED = "family_closed"
    STREAM_ENDED = "stream_ended"


def iter_lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield lines from a text stream without their terminators"""
    for line in stream:
        if line.endswith("\r\n"):
            yield line[:-2]
        elif line.endswith("\n"):
            yield line[:-1]
        else:
            yield line


class FamilyStateMachine:
    """Reads HELP, TYPE and sample lines one family at a time

    A family ends when a line fails to parse as a sample. That line is handed
    back from consume_family() and becomes the HELP line of the next family.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self.state = State.AWAIT_HELP
        self.line_number = 0
        self.pending_line: Optional[str] = None

    def _read_line(self) -> Optional[str]:
        """Next line from the source, or None at end of stream"""
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"failed reading line {self.line_number + 1}: {e}", self.line_number + 1) from e
        self.line_number += 1
        return line

    def consume_family(self, pending_line: Optional[str] = None) -> Generator[FamilyEvent, None, Optional[str]]:
        """Consume one family, yielding render events

        Returns the line that ended the family, or None when the stream ended.
        """
        self.state = State.AWAIT_HELP
        help_line = pending_line if pending_line is not None else self._read_line()
        if help_line is None:
            self.state = State.STREAM_ENDED
            return None
        try:
            name, help_text = parse_help_line(help_line)
        except LineParseError as e:
            raise HelpLineError(f"expected HELP line: {e}", self.line_number, help_line) from e

        self.state = State.AWAIT_TYPE
        type_line = self._read_line()
        if type_line is None:
            raise TypeLineError(f"stream ended before TYPE line of {name!r}", self.line_number)
        try:
            type_name, metric_type = parse_type_line(type_line)
        except LineParseError as e:
            raise TypeLineError(f"expected TYPE line for {name!r}: {e}", self.line_number, type_line) from e
        if type_name != name:
            raise FamilyMismatchError(
                f"TYPE line names {type_name!r} but HELP line named {name!r}",
                self.line_number,
                type_line,
            )

        family = FamilyRecord(name=name, metric_type=metric_type, help_text=help_text)
        aggregator = create_aggregator(family)
        yield FamilyEvent(kind=EventKind.HEADER, family=family)

        self.state = State.CONSUMING_SAMPLES
        next_line = None
        while True:
            line = self._read_line()
            if line is None:
                break
            try:
                sample = parse_sample_line(line)
            except LineParseError:
                next_line = line
                break
            try:
                events = aggregator.observe(sample)
            except SampleMismatch as e:
                raise UnexpectedSampleError(str(e), self.line_number, line) from e
            yield from events

        yield from aggregator.finish()
        self.state = State.STREAM_ENDED if next_line is None else State.FAMILY_CLOSED
        log_family_parsed(logger, family)
        return next_line

    def events(self) -> Iterator[FamilyEvent]:
        """Yield render events for every family in the stream"""
        while True:
            self.pending_line = yield from self.consume_family(self.pending_line)
            if self.pending_line is None:
                self.state = State.STREAM_ENDED
                return
