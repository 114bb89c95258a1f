"""Workflow controllers for the Generate and Edit modes."""

from .base import (
    ErrorEvent,
    ImageAddedEvent,
    Progress,
    ProgressEvent,
    WorkflowBase,
    WorkflowEvent,
    WorkflowStatus,
)
from .edit import EditWorkflow
from .generation import GenerationWorkflow

__all__ = [
    "EditWorkflow",
    "ErrorEvent",
    "GenerationWorkflow",
    "ImageAddedEvent",
    "Progress",
    "ProgressEvent",
    "WorkflowBase",
    "WorkflowEvent",
    "WorkflowStatus",
]
