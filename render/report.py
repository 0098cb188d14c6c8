"""Drive the family state machine and print rendered rows"""
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from rich.console import Console

from config import Config
from metrics.models import EventKind
from parsing.family import FamilyStateMachine, iter_lines
from .renderer import render_event


@dataclass
class ReportSummary:
    """Totals for one report run"""
    families: int = 0
    samples: int = 0
    groups: int = 0
    elapsed_seconds: float = 0.0


def create_console(config: Config, file=None) -> Console:
    """Build the output console from configuration"""
    return Console(file=file, **config.get_console_options())


class ReportWriter:
    """Prints one block per metric family as the stream is read"""

    def __init__(self, config: Config, console: Optional[Console] = None):
        self.config = config
        self.console = console or create_console(config)

    def run(self, stream: Iterable[str]) -> ReportSummary:
        """Render every family in the stream; structural errors propagate"""
        summary = ReportSummary()
        start_time = time.perf_counter()
        machine = FamilyStateMachine(iter_lines(stream))

        for event in machine.events():
            if event.kind == EventKind.HEADER:
                summary.families += 1
            elif event.kind == EventKind.SAMPLES:
                summary.samples += len(event.samples)
            else:
                summary.groups += 1
            for line in render_event(event, sort_by_value=self.config.sort_samples):
                self.console.print(line)

        summary.elapsed_seconds = time.perf_counter() - start_time
        return summary
