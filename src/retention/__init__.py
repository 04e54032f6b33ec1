"""Retention selection, deletion and reporting stages."""

from .metrics import RunMetrics
from .selector import RetentionDecision, select
from .orchestrator import DeletionOrchestrator, ExecutionMode, OperationOutcome
from .report import Reporter, RunReport

__all__ = [
    "RunMetrics",
    "RetentionDecision",
    "select",
    "DeletionOrchestrator",
    "ExecutionMode",
    "OperationOutcome",
    "Reporter",
    "RunReport",
]
