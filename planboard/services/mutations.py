"""Optimistic mutation coordinator.

Every task change is committed to the local :class:`TaskStore` first, so
readers see it immediately, and then persisted through the remote
repository. Remote calls for the same task id run one at a time in issue
order, so the last mutation issued is also the last one persisted. A failed
remote call rolls the local commit back (unless a newer mutation of the same
task has been committed since), runs the caller's ``revert`` hook and raises
an error notification; nothing propagates to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from planboard.core.errors import PlanboardError, TaskNotFoundError, ValidationRejected
from planboard.core.logging import get_logger
from planboard.core.task_status import TaskStatus
from planboard.models.tasks import Task, task_key
from planboard.schemas.tasks import TaskPatch
from planboard.services.dates import HolidaySet, has_valid_boundaries, to_inclusive_end
from planboard.services.notifications import Notifier
from planboard.services.status_machine import resolve_transition
from planboard.services.task_form import TITLE_REQUIRED, TaskForm
from planboard.services.task_store import TaskStore

logger = get_logger(__name__)

UPDATE_FAILED = "Failed to update the task"
CREATE_FAILED = "Failed to create the task"
DELETE_FAILED = "Failed to delete the task"
NON_WORKING_BOUNDARIES = "Start and end dates must be working days"
TASK_CREATED = "Task created"
TASK_UPDATED = "Task updated"
TASK_DELETED = "Task deleted"

Revert = Callable[[], object]


class TaskRepository(Protocol):
    """Remote task persistence; dates cross it in the inclusive convention."""

    async def list(self) -> list[Task]: ...

    async def create(self, task: Task) -> Task: ...

    async def update(self, task_id: object, task: Task) -> Task: ...

    async def delete(self, task_id: object) -> None: ...


@dataclass(frozen=True)
class MutationOutcome:
    """Result of one pipeline run; ``task`` is the final local state."""

    ok: bool
    task: Task | None = None
    error: Exception | None = None

    @property
    def rejected(self) -> bool:
        return isinstance(self.error, PlanboardError)


def normalize_patch(patch: TaskPatch) -> dict[str, Any]:
    """Turn a patch into field changes on the canonical task.

    The exclusive ``end`` folds into the inclusive ``end_date`` unless an
    inclusive end is supplied too. A patch nulling both ends of the span
    clears every date field together.
    """
    supplied = patch.supplied()
    changes: dict[str, Any] = {}
    for name in ("description", "status_id", "resource_id"):
        if name in supplied:
            changes[name] = supplied[name]
    if supplied.get("title"):
        changes["title"] = supplied["title"]
    if supplied.get("is_conge") is not None:
        changes["is_conge"] = supplied["is_conge"]

    if patch.clears_schedule():
        changes["start_date"] = None
        changes["end_date"] = None
        return changes
    if "start_date" in supplied:
        changes["start_date"] = supplied["start_date"]
    if "end_date" in supplied:
        changes["end_date"] = supplied["end_date"]
    elif "end" in supplied:
        changes["end_date"] = to_inclusive_end(supplied["end"])
    return changes


def run_revert(revert: Revert | None, *, task_id: object) -> None:
    if revert is None:
        return
    try:
        revert()
    except Exception:
        logger.exception("task.mutation.revert_failed", extra={"task_id": str(task_id)})


class MutationCoordinator:
    """Applies task mutations locally, then remotely, with rollback."""

    def __init__(
        self,
        store: TaskStore,
        repository: TaskRepository,
        notifier: Notifier,
        *,
        holidays: HolidaySet | None = None,
    ) -> None:
        self.store = store
        self.repository = repository
        self.notifier = notifier
        self.holidays: HolidaySet = holidays or {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._generations: dict[str, int] = {}
        self._pending: dict[str, int] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def _claim(self, key: str) -> int:
        """Register an in-flight operation on ``key`` and return its generation."""
        self._pending[key] = self._pending.get(key, 0) + 1
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation

    def _release(self, key: str) -> None:
        """Forget the per-task lock and generation once nothing is in flight."""
        remaining = self._pending.get(key, 0) - 1
        if remaining > 0:
            self._pending[key] = remaining
            return
        self._pending.pop(key, None)
        self._locks.pop(key, None)
        self._generations.pop(key, None)

    @property
    def tracked_tasks(self) -> set[str]:
        """Task keys with a mutation or delete still in flight."""
        return set(self._pending)

    def _is_latest(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    async def apply_mutation(
        self,
        task_id: object,
        patch: TaskPatch | Mapping[str, Any],
        *,
        revert: Revert | None = None,
        success_message: str | None = None,
        skip_remote: bool = False,
    ) -> MutationOutcome:
        """Validate, commit locally, persist remotely and report.

        A WIP change missing its prerequisites is redirected by the status
        rules and reported with a warning; it still goes through.
        """
        if not isinstance(patch, TaskPatch):
            patch = TaskPatch.model_validate(dict(patch))
        key = task_key(task_id)
        self.store.begin_processing()
        try:
            existing = self.store.get(task_id)
            if existing is None:
                logger.warning("task.mutation.not_found", extra={"task_id": key})
                run_revert(revert, task_id=key)
                return MutationOutcome(ok=False, error=TaskNotFoundError(task_id))

            transition = resolve_transition(existing, patch, self.holidays)
            if transition.rejected and transition.reason:
                self.notifier.warning(transition.reason)

            updated = existing.with_changes(**normalize_patch(transition.patch))
            generation = self._claim(key)
            try:
                return await self._commit(
                    existing,
                    updated,
                    generation,
                    revert=revert,
                    success_message=success_message,
                    skip_remote=skip_remote,
                )
            finally:
                self._release(key)
        finally:
            self.store.end_processing()

    async def _commit(
        self,
        existing: Task,
        updated: Task,
        generation: int,
        *,
        revert: Revert | None,
        success_message: str | None,
        skip_remote: bool,
    ) -> MutationOutcome:
        key = existing.key
        self.store.replace(updated)
        logger.debug(
            "task.mutation.committed",
            extra={
                "task_id": key,
                "status_id": updated.status_id,
                "generation": generation,
            },
        )

        if skip_remote:
            if success_message:
                self.notifier.success(success_message)
            return MutationOutcome(ok=True, task=updated)

        async with self._lock_for(key):
            try:
                persisted = await self.repository.update(existing.id, updated)
            except Exception as exc:
                logger.warning(
                    "task.mutation.remote_failed",
                    extra={"task_id": key, "error": str(exc) or type(exc).__name__},
                )
                if self._is_latest(key, generation):
                    self.store.replace(existing)
                self.notifier.error(UPDATE_FAILED)
                run_revert(revert, task_id=key)
                return MutationOutcome(ok=False, task=self.store.get(key), error=exc)

        final = persisted if isinstance(persisted, Task) else updated
        if self._is_latest(key, generation):
            self.store.replace(final)
        if success_message:
            self.notifier.success(success_message)
        return MutationOutcome(ok=True, task=final)

    async def delete_task(
        self,
        task_id: object,
        *,
        success_message: str | None = TASK_DELETED,
    ) -> MutationOutcome:
        """Remove locally, then remotely; a failed remote delete restores the task."""
        key = task_key(task_id)
        self.store.begin_processing()
        try:
            removed = self.store.remove(task_id)
            if removed is None:
                logger.warning("task.delete.not_found", extra={"task_id": key})
                return MutationOutcome(ok=False, error=TaskNotFoundError(task_id))
            index, task = removed
            self._claim(key)
            try:
                return await self._persist_delete(index, task, success_message=success_message)
            finally:
                self._release(key)
        finally:
            self.store.end_processing()

    async def _persist_delete(
        self,
        index: int,
        task: Task,
        *,
        success_message: str | None,
    ) -> MutationOutcome:
        key = task.key
        async with self._lock_for(key):
            try:
                await self.repository.delete(task.id)
            except Exception as exc:
                logger.warning(
                    "task.delete.remote_failed",
                    extra={"task_id": key, "error": str(exc) or type(exc).__name__},
                )
                if key not in self.store:
                    self.store.insert(index, task)
                self.notifier.error(DELETE_FAILED)
                return MutationOutcome(ok=False, task=task, error=exc)

        if success_message:
            self.notifier.success(success_message)
        logger.info("task.delete.completed", extra={"task_id": key})
        return MutationOutcome(ok=True, task=task)

    async def submit_task(self, form: TaskForm) -> MutationOutcome:
        """Create or update a task from the edit form."""
        errors = form.validate()
        if "title" in errors:
            self.notifier.error(TITLE_REQUIRED)
            return MutationOutcome(ok=False, error=ValidationRejected(TITLE_REQUIRED))
        if errors:
            message = next(iter(errors.values()))
            self.notifier.warning(message)
            return MutationOutcome(ok=False, error=ValidationRejected(message))
        if form.start and form.end and not has_valid_boundaries(form.start, form.end, self.holidays):
            self.notifier.warning(NON_WORKING_BOUNDARIES)
            return MutationOutcome(ok=False, error=ValidationRejected(NON_WORKING_BOUNDARIES))

        if not form.is_new:
            patch = TaskPatch(
                title=form.title.strip(),
                description=form.description.strip(),
                status_id=form.status_id or TaskStatus.ENTRANT.value,
                is_conge=form.is_conge,
                resource_id=form.resource_id or None,
                start_date=form.start,
                end_date=form.end,
            )
            return await self.apply_mutation(form.id, patch, success_message=TASK_UPDATED)
        return await self._create(form)

    async def _create(self, form: TaskForm) -> MutationOutcome:
        draft = Task(
            title=form.title.strip(),
            description=form.description.strip(),
            status_id=form.status_id or TaskStatus.ENTRANT.value,
            is_conge=form.is_conge,
            resource_id=form.resource_id or None,
            start_date=form.start,
            end_date=form.end,
        )
        self.store.begin_processing()
        try:
            try:
                created = await self.repository.create(draft)
            except Exception as exc:
                logger.warning(
                    "task.create.remote_failed",
                    extra={"error": str(exc) or type(exc).__name__},
                )
                self.notifier.error(CREATE_FAILED)
                return MutationOutcome(ok=False, error=exc)
            self.store.append(created)
            self.notifier.success(TASK_CREATED)
            logger.info("task.create.completed", extra={"task_id": created.key})
            return MutationOutcome(ok=True, task=created)
        finally:
            self.store.end_processing()
