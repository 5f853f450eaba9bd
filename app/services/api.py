# app/services/api.py

import os
import requests
from dotenv import load_dotenv


load_dotenv()

# Base URL of the FastAPI backend
API_URL = os.getenv("API_URL", "http://localhost:8000")


class ApiError(Exception):
    """
    Non-2xx response (or transport failure, status_code 0).
    ``errors`` maps field name to message for validation failures.
    """

    def __init__(self, status_code: int, message: str, errors: list | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = {e["field"]: e["message"] for e in (errors or []) if "field" in e}


class Unauthorized(ApiError):
    pass


class ApiClient:
    """
    JSON client for the task manager API.

    ``http`` is anything with a requests-style ``request(method, url, ...)``
    (a ``requests.Session`` by default). When ``token`` is set every call
    carries it as a bearer token.
    """

    def __init__(self, base_url: str = API_URL, http=None, timeout: float = 10, on_unauthorized=None):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.token = None
        self.on_unauthorized = on_unauthorized

    def _request(self, method: str, path: str, token=None, **kwargs):
        # an explicit token is checked on its own; its 401 says nothing about the session
        notify = token is None
        token = token or self.token
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            res = self.http.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise ApiError(0, f"Could not reach server: {e}") from e

        try:
            data = res.json()
        except ValueError:
            data = {}

        if res.status_code == 401:
            if self.on_unauthorized and notify:
                self.on_unauthorized()
            raise Unauthorized(401, data.get("message", "Unauthorized"))
        if res.status_code >= 400:
            raise ApiError(res.status_code, data.get("message", f"Error: Status {res.status_code}"), data.get("errors"))
        return data

    # -------------------------------
    # Authentication
    # -------------------------------

    def register(self, name, email, password):
        return self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})

    def login(self, email, password):
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def me(self, token=None):
        return self._request("GET", "/auth/me", token=token)["user"]

    # -------------------------------
    # Profile
    # -------------------------------

    def get_profile(self):
        return self._request("GET", "/profile")["user"]

    def update_profile(self, **fields):
        return self._request("PUT", "/profile", json=fields)["user"]

    # -------------------------------
    # Tasks
    # -------------------------------

    def list_tasks(self, status=None, priority=None, search=None, sort_by="createdAt", sort_order="desc"):
        params = {"sortBy": sort_by, "sortOrder": sort_order}
        if status:
            params["status"] = status
        if priority:
            params["priority"] = priority
        if search:
            params["search"] = search
        return self._request("GET", "/tasks", params=params)

    def get_task(self, task_id):
        return self._request("GET", f"/tasks/{task_id}")["task"]

    def create_task(self, data):
        return self._request("POST", "/tasks", json=data)["task"]

    def update_task(self, task_id, data):
        return self._request("PUT", f"/tasks/{task_id}", json=data)["task"]

    def delete_task(self, task_id):
        return self._request("DELETE", f"/tasks/{task_id}")

    def health(self):
        return self._request("GET", "/health")
