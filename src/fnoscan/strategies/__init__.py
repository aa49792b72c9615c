"""Session qualification rules used by the scanner."""

from .qualification import Qualification, classify, summarize_open_interest

__all__ = [
    "Qualification",
    "classify",
    "summarize_open_interest",
]
