"""Task completion toggle with optimistic update of the cached task list."""

import logging
from typing import Any

from src.core.exceptions import AppException, NotFoundError
from src.dashboard.cache import QueryCache, make_key
from src.dashboard.client import ApiClient
from src.dashboard.mutations import Mutation, Rollback
from src.dashboard.notifications import Notifier

TASKS_PATH = "/tasks"
TASKS_KEY = make_key(TASKS_PATH)


class TaskCompletionToggle:
    """Flips a task's ``completed`` flag; the cached list is rolled back if the server refuses."""

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        notifier: Notifier | None = None,
        logger: logging.Logger | None = None,
    ):
        self.api = api
        self.cache = cache
        self.notifier = notifier or Notifier()
        self.logger = logger or logging.getLogger(__name__)
        self.mutation: Mutation[tuple[int, bool], Any] = Mutation(
            self._send,
            name="toggle task",
            optimistic=self._apply_optimistic,
            on_success=self._on_success,
            on_error=self._on_error,
            logger=self.logger,
        )

    async def _current_state(self, task_id: int) -> bool:
        for task in self.cache.get_data(TASKS_KEY) or []:
            if task.get("id") == task_id:
                return bool(task.get("completed"))
        task = await self.api.get(f"{TASKS_PATH}/{task_id}")
        if not task:
            raise NotFoundError("Task", task_id)
        return bool(task.get("completed"))

    async def toggle(self, task_id: int) -> dict | None:
        """Returns the updated task, or None when the update failed or was refused (already notified)."""
        if self._busy():
            return None
        try:
            completed = not await self._current_state(task_id)
        except AppException as e:
            self.notifier.error("Error updating task", e.message)
            return None
        if self._busy():
            return None
        return await self.mutation.run((task_id, completed))

    def _busy(self) -> bool:
        if not self.mutation.is_pending:
            return False
        self.notifier.info("Please wait", "Another task update is in progress.")
        return True

    def _apply_optimistic(self, variables: tuple[int, bool]) -> Rollback | None:
        task_id, completed = variables
        previous = self.cache.get_data(TASKS_KEY)
        if previous is None:
            return None
        self.cache.set_data(
            TASKS_KEY,
            [{**t, "completed": completed} if t.get("id") == task_id else t for t in previous],
        )
        return lambda: self.cache.set_data(TASKS_KEY, previous)

    async def _send(self, variables: tuple[int, bool]) -> Any:
        task_id, completed = variables
        return await self.api.patch(f"{TASKS_PATH}/{task_id}", json={"completed": completed})

    def _on_success(self, task: Any, variables: tuple[int, bool]) -> None:
        _, completed = variables
        self.cache.invalidate(TASKS_PATH)
        self.notifier.success(
            "Task updated", "Task marked as completed." if completed else "Task reopened."
        )

    def _on_error(self, error: Exception, variables: tuple[int, bool]) -> None:
        message = error.message if isinstance(error, AppException) else str(error)
        self.notifier.error("Error updating task", message)
