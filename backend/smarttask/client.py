from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the task API."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """
    Thin gateway over the task REST API.

    Every method issues exactly one request. A non-2xx response raises
    ApiError with the status in the message; transport errors from
    ``requests`` are logged and re-raised as-is.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        cookies: Optional[Dict[str, str]] = None,
        bearer_token: Optional[str] = None,
        timeout: float = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        # same session cookie the browser would send
        for name, value in (cookies or {}).items():
            self.session.cookies.set(name, value)
        if bearer_token:
            self.session.headers["Authorization"] = f"Bearer {bearer_token}"
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, failure: str, json: Any = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise
        if not 200 <= r.status_code < 300:
            raise ApiError(f"{failure}. Status: {r.status_code}", r.status_code)
        return r

    # ---------- tasks ----------
    def get_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks", "Failed to fetch tasks").json()

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}", f"Failed to fetch task with ID: {task_id}").json()

    def create_task(self, title: str) -> Dict[str, Any]:
        return self._request("POST", "/tasks", "Failed to create task", json={"title": title}).json()

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/tasks/{task_id}", f"Failed to update task with ID: {task_id}", json=updates
        ).json()

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}", f"Failed to delete task with ID: {task_id}")

    # ---------- subtasks ----------
    def create_subtask(self, task_id: str, title: str) -> Dict[str, Any]:
        return self._request(
            "POST", f"/tasks/{task_id}/subtasks", f"Failed to create subtask for task {task_id}",
            json={"title": title},
        ).json()

    def update_subtask(self, subtask_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/tasks/subtasks/{subtask_id}", f"Failed to update subtask with ID: {subtask_id}", json=updates
        ).json()

    def delete_subtask(self, subtask_id: str) -> None:
        self._request("DELETE", f"/tasks/subtasks/{subtask_id}", f"Failed to delete subtask with ID: {subtask_id}")
