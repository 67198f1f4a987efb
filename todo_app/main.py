import logging
from fastapi import FastAPI
from todo_app.core.config import settings
from todo_app.core.database import engine, Base
from todo_app.models import document, user  # noqa: F401  (tables)
from todo_app.routers import health, auth, todos

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="To-Do List API",
    version="1.0.0"
)

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(todos.router)
