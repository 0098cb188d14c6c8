"""Line-oriented parsing of the Prometheus text exposition format"""
from .errors import ExpositionError, LineParseError, StructuralError
from .lines import parse_help_line, parse_sample_line, parse_type_line
from .family import FamilyStateMachine

__all__ = [
    'ExpositionError',
    'LineParseError',
    'StructuralError',
    'parse_help_line',
    'parse_sample_line',
    'parse_type_line',
    'FamilyStateMachine'
]
