"""Orchestrator - listing capture and auto-fill workflows."""

from .autofill import AutofillResult, autofill, capture_page

__all__ = [
    "AutofillResult",
    "autofill",
    "capture_page",
]
