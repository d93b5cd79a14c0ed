"""Plain-text rendering of recommendations and match breakdowns."""

from .context import build_breakdown_context, build_digest_context
from .templates import ReportTemplateError, TemplateRenderer

__all__ = [
    "TemplateRenderer",
    "ReportTemplateError",
    "build_digest_context",
    "build_breakdown_context",
]
