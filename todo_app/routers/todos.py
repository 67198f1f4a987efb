from fastapi import APIRouter, Depends, HTTPException, Response, status, Query
from sqlalchemy.orm import Session

from todo_app.core.database import get_db
from todo_app.core.errors import DocumentNotFound
from todo_app.routers.auth import get_auth_session
from todo_app.schemas.todo import TodoCreate, TodoUpdate, TodoResponse, TodoListResponse
from todo_app.services.document_store import DocumentStore
from todo_app.services.identity import AuthSession
from todo_app.services.task_repository import TaskRepository, ActionResult, FilterMode, Outcome, Task

router = APIRouter(prefix="/todos", tags=["todos"])


def get_repository(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session)
) -> TaskRepository:
    repository = TaskRepository(DocumentStore(db), session)
    check(repository.load())
    return repository


def check(result: ActionResult) -> ActionResult:
    """FAILED -> 404 si document absent, 502 pour toute autre erreur du store"""
    if result.ok:
        return result
    if isinstance(result.error, DocumentNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Document store unavailable")


def get_cached_task(task_id: str, repository: TaskRepository) -> Task:
    task = repository.get(task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def render(repository: TaskRepository, result: ActionResult, mode: FilterMode = FilterMode.ALL) -> dict:
    return {
        "outcome": result.outcome,
        "filter": mode,
        "items": repository.filter_view(mode),
        "error": str(result.error) if result.error else None
    }


@router.get("", response_model=TodoListResponse)
def list_todos(
    mode: FilterMode = Query(FilterMode.ALL, alias="filter"),
    repository: TaskRepository = Depends(get_repository)
):
    return render(repository, ActionResult(Outcome.APPLIED), mode)


@router.post("", response_model=TodoListResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    response: Response,
    repository: TaskRepository = Depends(get_repository)
):
    result = check(repository.add(todo_data.title, todo_data.priority, todo_data.due_date))
    if result.outcome == Outcome.IGNORED:
        # rien n'a été créé
        response.status_code = status.HTTP_200_OK
    return render(repository, result)


@router.get("/{task_id}", response_model=TodoResponse)
def get_todo(
    task_id: str,
    repository: TaskRepository = Depends(get_repository)
):
    return get_cached_task(task_id, repository)


@router.post("/{task_id}/toggle", response_model=TodoListResponse)
def toggle_todo(
    task_id: str,
    repository: TaskRepository = Depends(get_repository)
):
    task = get_cached_task(task_id, repository)
    result = check(repository.toggle_complete(task))
    return render(repository, result)


@router.put("/{task_id}", response_model=TodoListResponse)
def update_todo(
    task_id: str,
    todo_data: TodoUpdate,
    repository: TaskRepository = Depends(get_repository)
):
    task = get_cached_task(task_id, repository)
    result = check(repository.edit(task, todo_data.title, todo_data.priority, todo_data.due_date))
    return render(repository, result)


@router.delete("/{task_id}", response_model=TodoListResponse)
def delete_todo(
    task_id: str,
    repository: TaskRepository = Depends(get_repository)
):
    result = check(repository.delete(task_id))
    return render(repository, result)
