"""Exceptions raised while reading an exposition stream"""
from typing import Optional


class ExpositionError(Exception):
    """Base class for all exposition parsing failures"""


class LineParseError(ExpositionError):
    """A single line does not match the expected grammar"""

    def __init__(self, message: str, line: str = "", position: int = 0):
        super().__init__(message)
        self.line = line
        self.position = position


class UnknownMetricTypeError(LineParseError):
    """TYPE line names a type outside counter/gauge/histogram/summary"""


class StructuralError(ExpositionError):
    """The stream violates the HELP/TYPE/sample block structure"""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class HelpLineError(StructuralError):
    """Expected a HELP line"""


class TypeLineError(StructuralError):
    """Expected a TYPE line"""


class FamilyMismatchError(StructuralError):
    """HELP and TYPE lines name different metrics"""


class UnexpectedSampleError(StructuralError):
    """Sample name does not fit the family being consumed"""


class InputReadError(ExpositionError):
    """The line source failed before end of stream"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        super().__init__(message)
