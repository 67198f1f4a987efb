"""
Task repository - les intentions de l'UI traduites en appels au document store.

Le cache `tasks` est entièrement reconstruit après chaque mutation
réussie (pas de patch local), trié par date d'échéance décroissante.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from todo_app.core.config import settings
from todo_app.core.errors import StoreError
from todo_app.services.document_store import DocumentStore
from todo_app.services.identity import AuthSession

logger = logging.getLogger(__name__)


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FilterMode(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


class Outcome(str, Enum):
    APPLIED = "applied"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass
class ActionResult:
    outcome: Outcome
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.FAILED


@dataclass
class Task:
    id: str
    title: str
    completed: bool
    priority: Priority
    due_date: date
    owner_id: str

    @classmethod
    def from_document(cls, record_id: str, fields: Dict[str, Any]) -> "Task":
        due = fields["dueDate"]
        if isinstance(due, datetime):
            due = due.date()
        return cls(
            id=record_id,
            title=fields["title"],
            completed=bool(fields.get("completed", False)),
            priority=Priority(fields.get("priority", Priority.MEDIUM)),
            due_date=due,
            owner_id=fields["ownerId"],
        )


class TaskRepository:

    def __init__(self, store: DocumentStore, session: AuthSession, collection: Optional[str] = None):
        self.store = store
        self.session = session
        self.collection = collection or settings.TODOS_COLLECTION
        self.tasks: List[Task] = []

    # ============ LECTURE ============

    def load(self) -> ActionResult:
        user_id = self.session.current_user_id
        if not user_id:
            return ActionResult(Outcome.IGNORED)

        try:
            records = self.store.query_by_equality(self.collection, "ownerId", user_id)
        except StoreError as e:
            # le cache précédent reste en place
            logger.warning(f"Loading tasks failed for uid={user_id}: {e}")
            return ActionResult(Outcome.FAILED, e)

        loaded = [Task.from_document(record_id, fields) for record_id, fields in records]
        # tri stable : les égalités gardent l'ordre du store
        self.tasks = sorted(loaded, key=lambda task: task.due_date, reverse=True)
        return ActionResult(Outcome.APPLIED)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def filter_view(self, mode: FilterMode = FilterMode.ALL) -> List[Task]:
        mode = FilterMode(mode)
        if mode == FilterMode.COMPLETED:
            return [task for task in self.tasks if task.completed]
        if mode == FilterMode.PENDING:
            return [task for task in self.tasks if not task.completed]
        return list(self.tasks)

    # ============ MUTATIONS ============

    def add(self, title: str, priority: Priority = Priority.MEDIUM, due_date: Optional[date] = None) -> ActionResult:
        title = (title or "").strip()
        user_id = self.session.current_user_id
        if not title or not user_id:
            return ActionResult(Outcome.IGNORED)

        fields = {
            "title": title,
            "completed": False,
            "priority": Priority(priority).value,
            "dueDate": due_date or date.today(),
            "ownerId": user_id,
        }
        try:
            self.store.insert(self.collection, fields)
        except StoreError as e:
            return self._failed("add", e)
        return self._reload()

    def toggle_complete(self, task: Task) -> ActionResult:
        return self._update(task.id, {"completed": not task.completed}, "toggle")

    def edit(self, task: Task, title: str, priority: Priority, due_date: date) -> ActionResult:
        title = (title or "").strip()
        if not title:
            return ActionResult(Outcome.IGNORED)

        fields = {
            "title": title,
            "priority": Priority(priority).value,
            "dueDate": due_date,
        }
        return self._update(task.id, fields, "edit")

    def delete(self, task_id: str) -> ActionResult:
        user_id = self.session.current_user_id
        if not user_id:
            return ActionResult(Outcome.IGNORED)

        try:
            self.store.delete(self.collection, task_id, match={"ownerId": user_id})
        except StoreError as e:
            return self._failed("delete", e)
        return self._reload()

    # ---- helpers ----

    def _update(self, task_id: str, fields: Dict[str, Any], action: str) -> ActionResult:
        user_id = self.session.current_user_id
        if not user_id:
            return ActionResult(Outcome.IGNORED)

        try:
            self.store.update_partial(self.collection, task_id, fields, match={"ownerId": user_id})
        except StoreError as e:
            return self._failed(action, e)
        return self._reload()

    def _reload(self) -> ActionResult:
        # la mutation est faite ; un échec du rechargement est seulement signalé
        reloaded = self.load()
        return ActionResult(Outcome.APPLIED, reloaded.error)

    def _failed(self, action: str, error: StoreError) -> ActionResult:
        logger.warning(f"Task {action} failed, cache unchanged: {error}")
        return ActionResult(Outcome.FAILED, error)
