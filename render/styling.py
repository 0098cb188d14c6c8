"""Terminal styling for report text"""
from rich.text import Text


METRIC_NAME = ("bold",)
METRIC_TYPE = ("bright_black",)
VALUE = ("bold", "white")
LABEL_KEY = ("blue",)
LABEL_VALUE = ("green",)
PAIR_KEY = ("cyan",)
MISSING = ("dim",)


def style(text: str, *attributes: str) -> Text:
    """Wrap text with rich style attributes such as 'bold' or 'green'"""
    return Text(text, style=" ".join(attributes))
