"""FastAPI web application for taskflow."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskflow import __version__
from taskflow.api.bridge import Bridge
from taskflow.api.dependencies import get_notification_service, get_task_manager
from taskflow.api.schemas import (
    BlogEntryCreate,
    BlogEntryUpdate,
    BlogStatusUpdate,
    BridgeCall,
    CategoryCreate,
    NotificationRequest,
    RecurringTaskCreate,
    RecurringTaskUpdate,
    StatusUpdate,
    SubGoalCreate,
    SubGoalInput,
    TaskCreate,
    TaskUpdate,
)
from taskflow.models.notification import NotificationSettings
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal
from taskflow.models.task_factory import new_id
from taskflow.notifications.service import NotificationService
from taskflow.services.task_manager import TaskManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = app.dependency_overrides.get(get_notification_service, get_notification_service)
    service = provider()
    service.start()
    try:
        yield
    finally:
        service.shutdown()


app = FastAPI(
    title="taskflow API",
    description="Personal task manager with recurring tasks and due-task reminders",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _not_found(kind: str, item_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} {item_id} not found")


def _sub_goals_for(task_id: str, inputs: List[SubGoalInput]) -> List[SubGoal]:
    now = datetime.now()
    return [
        SubGoal(
            id=item.id or new_id(),
            task_id=task_id,
            title=item.title,
            description=item.description,
            status=item.status,
            due_date=item.due_date,
            category=item.category,
            created_at=now,
            updated_at=now,
        )
        for item in inputs
    ]


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# Tasks
@app.get("/api/tasks/{section_id}")
def list_tasks(section_id: SectionId, manager: TaskManager = Depends(get_task_manager)):
    tasks = manager.get_tasks(section_id)
    return {"tasks": tasks, "count": len(tasks)}


@app.post("/api/tasks", status_code=201)
def create_task(request: TaskCreate, manager: TaskManager = Depends(get_task_manager)):
    """Create a task in a household, personal or official section."""
    fields = request.model_dump(exclude={"section_id", "title", "due_date", "sub_goals"})
    task_id = new_id()
    try:
        task = manager.create_task(
            request.section_id,
            request.title,
            request.due_date,
            task_id=task_id,
            sub_goals=_sub_goals_for(task_id, request.sub_goals),
            **fields,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"task": task}


@app.patch("/api/tasks/{task_id}")
def update_task(task_id: str, request: TaskUpdate, manager: TaskManager = Depends(get_task_manager)):
    changes: Dict[str, Any] = request.model_dump(exclude_unset=True, exclude={"sub_goals"})
    if request.sub_goals is not None:
        changes["sub_goals"] = _sub_goals_for(task_id, request.sub_goals)
    try:
        task = manager.update_task(task_id, **changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if task is None:
        raise _not_found("Task", task_id)
    return {"task": task}


@app.patch("/api/tasks/{task_id}/status")
def update_task_status(task_id: str, request: StatusUpdate, manager: TaskManager = Depends(get_task_manager)):
    if not manager.update_task_status(task_id, request.status):
        raise _not_found("Task", task_id)
    return {"task": manager.get_task(task_id)}


@app.delete("/api/tasks/{task_id}")
def delete_task(task_id: str, manager: TaskManager = Depends(get_task_manager)):
    if not manager.delete_task(task_id):
        raise _not_found("Task", task_id)
    return {"success": True}


# Recurring tasks
@app.get("/api/recurring-tasks/{section_id}")
def list_recurring_tasks(section_id: SectionId, manager: TaskManager = Depends(get_task_manager)):
    tasks = manager.get_recurring_tasks(section_id)
    return {"recurring_tasks": tasks, "count": len(tasks)}


@app.post("/api/recurring-tasks", status_code=201)
def create_recurring_task(request: RecurringTaskCreate, manager: TaskManager = Depends(get_task_manager)):
    fields = request.model_dump(exclude={"section_id", "title", "start_date"})
    try:
        task = manager.create_recurring_task(request.section_id, request.title, request.start_date, **fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"recurring_task": task}


@app.post("/api/recurring-tasks/refresh-status")
def refresh_recurring_statuses(manager: TaskManager = Depends(get_task_manager)):
    """Move recurring tasks whose start date has arrived from todo to in-progress."""
    return {"updated": manager.refresh_recurring_statuses()}


@app.patch("/api/recurring-tasks/{task_id}")
def update_recurring_task(
    task_id: str, request: RecurringTaskUpdate, manager: TaskManager = Depends(get_task_manager)
):
    try:
        task = manager.update_recurring_task(task_id, **request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if task is None:
        raise _not_found("Recurring task", task_id)
    return {"recurring_task": task}


@app.patch("/api/recurring-tasks/{task_id}/status")
def update_recurring_task_status(
    task_id: str, request: StatusUpdate, manager: TaskManager = Depends(get_task_manager)
):
    if not manager.update_recurring_task_status(task_id, request.status):
        raise _not_found("Recurring task", task_id)
    return {"recurring_task": manager.get_recurring_task(task_id)}


@app.delete("/api/recurring-tasks/{task_id}")
def delete_recurring_task(task_id: str, manager: TaskManager = Depends(get_task_manager)):
    if not manager.delete_recurring_task(task_id):
        raise _not_found("Recurring task", task_id)
    return {"success": True}


# Sub-goals
@app.get("/api/sub-goals/{task_id}")
def list_sub_goals(task_id: str, manager: TaskManager = Depends(get_task_manager)):
    sub_goals = manager.get_sub_goals(task_id)
    return {"sub_goals": sub_goals, "count": len(sub_goals)}


@app.post("/api/sub-goals", status_code=201)
def create_sub_goal(request: SubGoalCreate, manager: TaskManager = Depends(get_task_manager)):
    fields = request.model_dump(exclude={"task_id", "title", "due_date"})
    sub_goal = manager.add_sub_goal(request.task_id, request.title, request.due_date, **fields)
    if sub_goal is None:
        raise _not_found("Task", request.task_id)
    return {"sub_goal": sub_goal, "task": manager.get_task(request.task_id)}


@app.patch("/api/sub-goals/{sub_goal_id}/status")
def update_sub_goal_status(sub_goal_id: str, request: StatusUpdate, manager: TaskManager = Depends(get_task_manager)):
    """Update a sub-goal's status; the parent task's progress is returned with it."""
    if not manager.update_sub_goal_status(sub_goal_id, request.status):
        raise _not_found("Sub-goal", sub_goal_id)
    sub_goal = manager.get_sub_goal(sub_goal_id)
    return {"sub_goal": sub_goal, "task": manager.get_task(sub_goal.task_id)}


@app.delete("/api/sub-goals/{sub_goal_id}")
def delete_sub_goal(sub_goal_id: str, manager: TaskManager = Depends(get_task_manager)):
    if not manager.delete_sub_goal(sub_goal_id):
        raise _not_found("Sub-goal", sub_goal_id)
    return {"success": True}


# Categories
@app.get("/api/categories/{section_id}")
def list_categories(section_id: SectionId, manager: TaskManager = Depends(get_task_manager)):
    return {"categories": manager.get_categories(section_id)}


@app.post("/api/categories", status_code=201)
def add_category(request: CategoryCreate, manager: TaskManager = Depends(get_task_manager)):
    try:
        added = manager.add_category(request.section_id, request.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not added:
        raise HTTPException(status_code=409, detail=f"Category {request.name} already exists")
    return {"categories": manager.get_categories(request.section_id)}


@app.delete("/api/categories/{section_id}/{name}")
def remove_category(section_id: SectionId, name: str, manager: TaskManager = Depends(get_task_manager)):
    """Remove a category name; tasks already using it keep it."""
    if not manager.remove_category(section_id, name):
        raise _not_found("Category", name)
    return {"categories": manager.get_categories(section_id)}


# Blog entries
@app.get("/api/blog-entries")
def list_blog_entries(manager: TaskManager = Depends(get_task_manager)):
    entries = manager.get_blog_entries()
    return {"entries": entries, "count": len(entries)}


@app.post("/api/blog-entries", status_code=201)
def create_blog_entry(request: BlogEntryCreate, manager: TaskManager = Depends(get_task_manager)):
    fields = request.model_dump(exclude={"title", "due_date"})
    return {"entry": manager.create_blog_entry(request.title, request.due_date, **fields)}


@app.patch("/api/blog-entries/{entry_id}")
def update_blog_entry(entry_id: str, request: BlogEntryUpdate, manager: TaskManager = Depends(get_task_manager)):
    entry = manager.update_blog_entry(entry_id, **request.model_dump(exclude_unset=True))
    if entry is None:
        raise _not_found("Blog entry", entry_id)
    return {"entry": entry}


@app.patch("/api/blog-entries/{entry_id}/status")
def update_blog_entry_status(
    entry_id: str, request: BlogStatusUpdate, manager: TaskManager = Depends(get_task_manager)
):
    if not manager.update_blog_entry_status(entry_id, request.status):
        raise _not_found("Blog entry", entry_id)
    return {"entry": manager.get_blog_entry(entry_id)}


@app.post("/api/blog-entries/{entry_id}/advance")
def advance_blog_entry(entry_id: str, manager: TaskManager = Depends(get_task_manager)):
    """Move an entry to its next learning status (expert stays expert)."""
    entry = manager.advance_blog_entry(entry_id)
    if entry is None:
        raise _not_found("Blog entry", entry_id)
    return {"entry": entry}


@app.delete("/api/blog-entries/{entry_id}")
def delete_blog_entry(entry_id: str, manager: TaskManager = Depends(get_task_manager)):
    if not manager.delete_blog_entry(entry_id):
        raise _not_found("Blog entry", entry_id)
    return {"success": True}


# Sections
@app.get("/api/sections/{section_id}")
def get_section(section_id: SectionId, manager: TaskManager = Depends(get_task_manager)):
    return {"section": manager.get_section_data(section_id)}


# Notifications
@app.get("/api/due-tasks")
def list_due_tasks(manager: TaskManager = Depends(get_task_manager)):
    """Everything due today or earlier that is not completed."""
    items = manager.get_due_items()
    return {"due_tasks": items, "count": len(items)}


@app.get("/api/notification-settings")
def get_notification_settings(service: NotificationService = Depends(get_notification_service)):
    return service.get_settings()


@app.put("/api/notification-settings")
def save_notification_settings(
    settings: NotificationSettings, service: NotificationService = Depends(get_notification_service)
):
    service.apply_settings(settings)
    return {"success": True, "settings": service.get_settings()}


@app.get("/api/notifications/status")
def notification_status(service: NotificationService = Depends(get_notification_service)):
    return service.status()


@app.post("/api/notifications/check")
def check_notifications(service: NotificationService = Depends(get_notification_service)):
    items = service.check_due_tasks_now()
    return {"due_tasks": items, "count": len(items)}


@app.post("/api/notifications/show")
def show_notification(request: NotificationRequest, service: NotificationService = Depends(get_notification_service)):
    service.show_notification(request.title, request.body)
    return {"success": True}


@app.post("/api/system/suspend")
def system_suspend(service: NotificationService = Depends(get_notification_service)):
    service.suspend()
    return {"success": True, "sleeping": True}


@app.post("/api/system/resume")
def system_resume(service: NotificationService = Depends(get_notification_service)):
    """Wake reminders; each timer that fell due while asleep fires once."""
    return {"success": True, "sleeping": False, "caught_up": service.resume()}


# Analytics
@app.get("/api/analytics")
def task_analytics(manager: TaskManager = Depends(get_task_manager)):
    return manager.get_task_analytics()


@app.get("/api/analytics/blog")
def blog_analytics(manager: TaskManager = Depends(get_task_manager)):
    return manager.get_blog_analytics()


# Bridge
@app.post("/api/bridge/{operation}")
def bridge(
    operation: str,
    call: BridgeCall,
    manager: TaskManager = Depends(get_task_manager),
    service: NotificationService = Depends(get_notification_service),
):
    """Invoke a named operation with positional arguments."""
    return Bridge(manager, service).invoke(operation, call.args)
