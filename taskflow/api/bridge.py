"""Command bridge: named operations invoked with positional arguments.

Reads return the requested data (JSON-ready); writes return `{"success": bool}` with an
`error` message on failure. Unknown operation names never raise.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from fastapi.encoders import jsonable_encoder

from taskflow.models.blog_entry import BlogEntry, BlogStatus
from taskflow.models.notification import NotificationSettings
from taskflow.models.recurring_task import RecurringTask
from taskflow.models.section import SectionId
from taskflow.models.task import SubGoal, Task, TaskStatus
from taskflow.models.task_factory import new_id
from taskflow.notifications.service import NotificationService
from taskflow.services.task_manager import TaskManager

logger = logging.getLogger(__name__)


def _with_identity(payload: Dict[str, Any], **extra) -> Dict[str, Any]:
    """Fill id and timestamps on a raw entity payload; storage restamps them."""
    now = datetime.now()
    data = {"id": new_id(), "created_at": now, "updated_at": now}
    data.update({k: v for k, v in (payload or {}).items() if v is not None})
    data.update(extra)
    return data


def _ok(success: bool = True, error: Optional[str] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {"success": success}
    if error:
        result["error"] = error
    return result


class Bridge:
    def __init__(self, task_manager: TaskManager, notifications: NotificationService):
        self.tasks = task_manager
        self.notifications = notifications
        self._operations: Dict[str, Callable[..., Any]] = {
            "get-tasks": self.get_tasks,
            "save-task": self.save_task,
            "update-task-status": self.update_task_status,
            "delete-task": self.delete_task,
            "get-recurring-tasks": self.get_recurring_tasks,
            "save-recurring-task": self.save_recurring_task,
            "update-recurring-task-status": self.update_recurring_task_status,
            "delete-recurring-task": self.delete_recurring_task,
            "get-sub-goals": self.get_sub_goals,
            "save-sub-goals": self.save_sub_goals,
            "save-sub-goal": self.save_sub_goal,
            "update-sub-goal-status": self.update_sub_goal_status,
            "delete-sub-goal": self.delete_sub_goal,
            "get-blog-entries": self.get_blog_entries,
            "save-blog-entry": self.save_blog_entry,
            "update-blog-entry-status": self.update_blog_entry_status,
            "delete-blog-entry": self.delete_blog_entry,
            "get-categories": self.get_categories,
            "add-category": self.add_category,
            "remove-category": self.remove_category,
            "load-notification-settings": self.load_notification_settings,
            "save-notification-settings": self.save_notification_settings,
            "show-notification": self.show_notification,
            "check-due-tasks": self.check_due_tasks,
            "get-notification-status": self.get_notification_status,
            "trigger-notification-check": self.trigger_notification_check,
            "system-suspend": self.system_suspend,
            "system-resume": self.system_resume,
        }

    @property
    def operations(self) -> List[str]:
        return sorted(self._operations)

    def invoke(self, operation: str, args: Optional[List[Any]] = None) -> Any:
        handler = self._operations.get(operation)
        if handler is None:
            return _ok(False, f"Unknown operation: {operation}")
        try:
            return jsonable_encoder(handler(*(args or [])))
        except Exception as e:
            logger.error(f"Bridge operation {operation} failed: {type(e).__name__}: {str(e)}")
            return _ok(False, str(e))

    # Tasks
    def get_tasks(self, section_id: str) -> List[Task]:
        return self.tasks.get_tasks(SectionId(section_id))

    def save_task(self, task: Dict[str, Any], section_id: str) -> Dict[str, Any]:
        fields = {k: v for k, v in (task or {}).items() if v is not None}
        task_id = fields.get("id")
        if task_id and self.tasks.get_task(task_id) is not None:
            # Sub-goals change only through the sub-goal operations
            fields.pop("sub_goals", None)
            fields["section_id"] = section_id
            self.tasks.update_task(task_id, **fields)
        else:
            self.tasks.save_task(Task.model_validate(_with_identity(fields, section_id=section_id)))
        return _ok()

    def update_task_status(self, task_id: str, status: str) -> Dict[str, Any]:
        return _ok(self.tasks.update_task_status(task_id, TaskStatus(status)))

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return _ok(self.tasks.delete_task(task_id))

    # Recurring tasks
    def get_recurring_tasks(self, section_id: str) -> List[RecurringTask]:
        return self.tasks.get_recurring_tasks(SectionId(section_id))

    def save_recurring_task(self, task: Dict[str, Any], section_id: str) -> Dict[str, Any]:
        data = _with_identity(task, section_id=section_id)
        # Placeholder; the task manager derives the real value
        data.setdefault("next_occurrence", data.get("start_date"))
        self.tasks.save_recurring_task(RecurringTask.model_validate(data))
        return _ok()

    def update_recurring_task_status(self, task_id: str, status: str) -> Dict[str, Any]:
        return _ok(self.tasks.update_recurring_task_status(task_id, TaskStatus(status)))

    def delete_recurring_task(self, task_id: str) -> Dict[str, Any]:
        return _ok(self.tasks.delete_recurring_task(task_id))

    # Sub-goals
    def get_sub_goals(self, task_id: str) -> List[SubGoal]:
        return self.tasks.get_sub_goals(task_id)

    def save_sub_goals(self, task_id: str, sub_goals: List[Dict[str, Any]]) -> Dict[str, Any]:
        parsed = [SubGoal.model_validate(_with_identity(sg, task_id=task_id)) for sg in sub_goals or []]
        return _ok(self.tasks.replace_sub_goals(task_id, parsed) is not None)

    def save_sub_goal(self, sub_goal: Dict[str, Any]) -> Dict[str, Any]:
        return _ok(self.tasks.save_sub_goal(SubGoal.model_validate(_with_identity(sub_goal))) is not None)

    def update_sub_goal_status(self, sub_goal_id: str, status: str) -> Dict[str, Any]:
        return _ok(self.tasks.update_sub_goal_status(sub_goal_id, TaskStatus(status)))

    def delete_sub_goal(self, sub_goal_id: str) -> Dict[str, Any]:
        return _ok(self.tasks.delete_sub_goal(sub_goal_id))

    # Blog entries
    def get_blog_entries(self) -> List[BlogEntry]:
        return self.tasks.get_blog_entries()

    def save_blog_entry(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        self.tasks.save_blog_entry(BlogEntry.model_validate(_with_identity(entry)))
        return _ok()

    def update_blog_entry_status(self, entry_id: str, status: str) -> Dict[str, Any]:
        return _ok(self.tasks.update_blog_entry_status(entry_id, BlogStatus(status)))

    def delete_blog_entry(self, entry_id: str) -> Dict[str, Any]:
        return _ok(self.tasks.delete_blog_entry(entry_id))

    # Categories
    def get_categories(self, section_id: str) -> List[str]:
        return self.tasks.get_categories(SectionId(section_id))

    def add_category(self, section_id: str, name: str) -> Dict[str, Any]:
        if self.tasks.add_category(SectionId(section_id), name):
            return _ok()
        return _ok(False, f"Category already exists: {name}")

    def remove_category(self, section_id: str, name: str) -> Dict[str, Any]:
        # Removing a missing category is not an error
        self.tasks.remove_category(SectionId(section_id), name)
        return _ok()

    # Notifications
    def load_notification_settings(self) -> NotificationSettings:
        return self.notifications.get_settings()

    def save_notification_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        self.notifications.apply_settings(NotificationSettings.model_validate(settings))
        return _ok()

    def show_notification(self, title: str, body: str = "") -> Dict[str, Any]:
        self.notifications.show_notification(title, body)
        return _ok()

    def check_due_tasks(self):
        return self.notifications.check_due_tasks_now()

    def get_notification_status(self):
        return self.notifications.status()

    def trigger_notification_check(self) -> Dict[str, Any]:
        self.notifications.trigger_check()
        return _ok()

    def system_suspend(self) -> Dict[str, Any]:
        self.notifications.suspend()
        return _ok()

    def system_resume(self) -> Dict[str, Any]:
        self.notifications.resume()
        return _ok()
