import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from todo_api.config import Settings, get_settings
from todo_api.errors import TaskApiError
from todo_api.logging_setup import setup_logging
from todo_api.models.task import utc_now_iso
from todo_api.services.task_service import TaskService
from todo_api.storage.task_storage import JsonFileTaskStore, TaskStore

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class HealthStatus(BaseModel):
    status: str
    timestamp: str


class DeleteResult(BaseModel):
    message: str
    id: int


ENDPOINTS = {
    "GET /health": "Check API status",
    "GET /tasks": "Get all tasks",
    "GET /tasks/{id}": "Get a task by ID",
    "POST /tasks": "Create a new task",
    "PUT /tasks/{id}": "Update a task",
    "DELETE /tasks/{id}": "Delete a task",
}


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _as_payload(body: Any) -> Dict[str, Any]:
    # A JSON body that is not an object carries no fields
    return body if isinstance(body, dict) else {}


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskApiError)
    async def handle_task_api_error(request: Request, exc: TaskApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request body on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------

def create_app(store: Optional[TaskStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API. Pass `store` to swap the backing store (tests use a
    temporary file or InMemoryTaskStore); otherwise TASKS_FILE is used.
    """
    settings = settings or get_settings()
    if store is None:
        store = JsonFileTaskStore(settings.tasks_file)

    app = FastAPI(
        title="TODO API",
        description="Task manager backed by a single JSON file.",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.task_service = TaskService(store)

    _register_exception_handlers(app)

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    @app.get("/")
    def index():
        return {"message": "TODO API - Task Manager", "endpoints": ENDPOINTS}

    @app.get("/health", response_model=HealthStatus)
    def health():
        return {"status": "OK", "timestamp": utc_now_iso()}

    @app.get("/tasks")
    def list_tasks(service: TaskService = Depends(get_task_service)):
        return service.list_tasks()

    @app.get("/tasks/{task_id}")
    def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
        return service.get_task(task_id)

    @app.post("/tasks", status_code=201)
    def create_task(
        body: Any = Body(default=None),
        service: TaskService = Depends(get_task_service),
    ):
        """
        Create a task from {title, description?}.
        Title and description are stored trimmed.
        """
        return service.create_task(_as_payload(body))

    @app.put("/tasks/{task_id}")
    def update_task(
        task_id: str,
        body: Any = Body(default=None),
        service: TaskService = Depends(get_task_service),
    ):
        """
        Partial update: only title/description/completed present in the body
        are applied. updatedAt is refreshed on every successful call.
        """
        return service.update_task(task_id, _as_payload(body))

    @app.delete("/tasks/{task_id}", response_model=DeleteResult)
    def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
        return service.delete_task(task_id)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(
        "Server is running on http://%s:%s (tasks file: %s)",
        settings.host,
        settings.port,
        settings.tasks_file,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
