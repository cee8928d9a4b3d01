"""Domain exceptions raised inside the mutation and interaction pipeline."""

from __future__ import annotations


class PlanboardError(Exception):
    """Base class for recoverable engine errors."""

    code = "planboard_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationRejected(PlanboardError):
    """A gesture or submission failed a business rule before any mutation."""

    code = "validation_rejected"


class TaskNotFoundError(PlanboardError):
    """A mutation targeted a task id absent from the local collection."""

    code = "task_not_found"

    def __init__(self, task_id: object) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class DataLoadError(PlanboardError):
    """Every remote source failed while loading the workspace."""

    code = "data_load_failed"


class DragStateError(PlanboardError):
    """A drag gesture was started while another one is still active."""

    code = "drag_state_invalid"
