"""AI collaborator actions for the storyboard."""

from __future__ import annotations

from .service import AIResult, AIService, BulkSummaryResult

__all__ = ["AIResult", "AIService", "BulkSummaryResult"]
