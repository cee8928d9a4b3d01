"""Remote task CRUD."""

from __future__ import annotations

from planboard.core.logging import get_logger
from planboard.models.tasks import Task
from planboard.schemas.tasks import TaskRecord, TaskWrite
from planboard.services.api.client import ApiClient
from planboard.services.assembly import assemble_tasks

logger = get_logger(__name__)

TASKS_PATH = "/api/tasks"


def _task_from_response(payload: object, fallback: Task) -> Task:
    if not isinstance(payload, dict) or "id" not in payload:
        return fallback
    return TaskRecord.model_validate(payload).to_task()


class TaskApi:
    """Task endpoints; dates travel in the inclusive convention."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[Task]:
        payload = await self._client.get(TASKS_PATH)
        return assemble_tasks(payload)

    async def create(self, task: Task) -> Task:
        body = TaskWrite.from_task(task).to_wire()
        payload = await self._client.post(TASKS_PATH, body)
        created = _task_from_response(payload, task)
        logger.info("task.remote.created", extra={"task_id": created.key})
        return created

    async def update(self, task_id: object, task: Task) -> Task:
        body = TaskWrite.from_task(task).to_wire()
        payload = await self._client.put(f"{TASKS_PATH}/{task_id}", body)
        return _task_from_response(payload, task)

    async def delete(self, task_id: object) -> None:
        await self._client.delete(f"{TASKS_PATH}/{task_id}")
        logger.info("task.remote.deleted", extra={"task_id": str(task_id)})
