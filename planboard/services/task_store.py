"""In-memory task collection shared by every surface.

Only the mutation coordinator writes to it; every other component reads.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from planboard.models.tasks import Task, task_key


class TaskStore:
    """Ordered task list with id lookup and the shared ``processing`` flag."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)
        self._in_flight = 0

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return self.index_of(task_id) is not None

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def processing(self) -> bool:
        """True while any mutation is in flight; surfaces disable re-entry on it."""
        return self._in_flight > 0

    def begin_processing(self) -> None:
        self._in_flight += 1

    def end_processing(self) -> None:
        self._in_flight = max(self._in_flight - 1, 0)

    def index_of(self, task_id: object) -> int | None:
        key = task_key(task_id)
        for index, task in enumerate(self._tasks):
            if task.key == key:
                return index
        return None

    def get(self, task_id: object) -> Task | None:
        index = self.index_of(task_id)
        return self._tasks[index] if index is not None else None

    def reset(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    def append(self, task: Task) -> None:
        self._tasks.append(task)

    def insert(self, index: int, task: Task) -> None:
        self._tasks.insert(min(max(index, 0), len(self._tasks)), task)

    def replace(self, task: Task) -> bool:
        """Swap in ``task`` for the stored task with the same id."""
        index = self.index_of(task.id)
        if index is None:
            return False
        self._tasks[index] = task
        return True

    def remove(self, task_id: object) -> tuple[int, Task] | None:
        """Remove a task and return its former position with it."""
        index = self.index_of(task_id)
        if index is None:
            return None
        return index, self._tasks.pop(index)
