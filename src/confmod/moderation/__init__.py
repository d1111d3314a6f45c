"""Moderation aggregation and workflow pipeline."""

from confmod.moderation.aggregate import aggregate, merge
from confmod.moderation.fetch_details import fetch_details
from confmod.moderation.fetch_requests import build_list_params, fetch_requests
from confmod.moderation.pipeline import ModerationPipeline, open_pipeline
from confmod.moderation.query import apply_query, status_counts
from confmod.moderation.status_update import update_status
from confmod.moderation.workflow import SubmitResult, WorkflowController

__all__ = [
    "aggregate",
    "merge",
    "fetch_details",
    "build_list_params",
    "fetch_requests",
    "ModerationPipeline",
    "open_pipeline",
    "apply_query",
    "status_counts",
    "update_status",
    "SubmitResult",
    "WorkflowController",
]
