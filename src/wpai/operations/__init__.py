"""Operation handlers and their result types."""

from wpai.operations.handlers import SiteOperations
from wpai.operations.results import OperationError, OperationResult, Outcome
from wpai.operations.text import sanitize_text, slugify

__all__ = [
    "OperationError",
    "OperationResult",
    "Outcome",
    "SiteOperations",
    "sanitize_text",
    "slugify",
]
