"""Pydantic schemas for to-do request/response validation."""

from pydantic import BaseModel, ConfigDict
from datetime import date
from typing import List, Optional

from todo_app.services.task_repository import FilterMode, Outcome, Priority

# Schemas to-dos

class TodoCreate(BaseModel):
    # un titre vide n'est pas une erreur : l'ajout est ignoré
    title: str
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None

class TodoUpdate(BaseModel):
    title: str
    priority: Priority
    due_date: date

class TodoResponse(BaseModel):
    """ownerId n'est jamais exposé"""

    id: str
    title: str
    completed: bool
    priority: Priority
    due_date: date

    model_config = ConfigDict(from_attributes=True)

class TodoListResponse(BaseModel):
    outcome: Outcome
    filter: FilterMode
    items: List[TodoResponse]
    # écriture faite mais liste non rechargée : items est l'ancienne liste
    error: Optional[str] = None
