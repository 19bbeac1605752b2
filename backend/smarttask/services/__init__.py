from .tasks import TaskService, TaskServiceError, ParentTaskNotFoundError, belongs_to_owner

__all__ = ["TaskService", "TaskServiceError", "ParentTaskNotFoundError", "belongs_to_owner"]
