"""Background execution of parsing and filtering."""

from chat_insights.execution.harness import (
    ExecutionHarness,
    OperationKind,
    OperationState,
    Outcome,
    OutcomeStatus,
)

__all__ = [
    "ExecutionHarness",
    "OperationKind",
    "OperationState",
    "Outcome",
    "OutcomeStatus",
]
