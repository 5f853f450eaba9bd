# app/session.py

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import MutableMapping

from app.services.api import ApiClient, ApiError


logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass
class AuthResult:
    success: bool
    message: str = ""
    errors: dict = field(default_factory=dict)


class ClientSession:
    """
    Holds the signed-in identity for one browser session.

    ``storage`` is the persistent key/value store (an encrypted cookie
    jar in the Streamlit app, a plain dict in tests). Call ``init()`` once
    when the UI starts and ``teardown()`` when it goes away.
    """

    def __init__(self, api: ApiClient, storage: MutableMapping):
        self.api = api
        self.storage = storage
        self.state = SessionState.ANONYMOUS
        self.user = None
        self._lock = Lock()
        self._executor = None
        self._pending = None
        api.on_unauthorized = self.handle_unauthorized

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def token(self):
        return self.api.token

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def init(self) -> Future | None:
        """
        Restores a persisted identity optimistically and starts re-verifying
        the token in the background. Returns the verification future, or
        None when nothing was persisted. The outcome is only applied by
        ``apply_verification()``, on the caller's thread.
        """
        token = self.storage.get(TOKEN_KEY)
        saved_user = self.storage.get(USER_KEY)
        if not token or not saved_user:
            return None

        try:
            user = json.loads(saved_user)
        except ValueError:
            logger.warning("Discarding unreadable cached user")
            with self._lock:
                self._clear()
            return None

        with self._lock:
            self.api.token = token
            self.user = user
            self.state = SessionState.AUTHENTICATED

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="session-verify")
        future = self._executor.submit(self._verify, token)
        self._pending = (future, token)
        return future

    def teardown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._pending = None

    def _verify(self, token: str) -> dict | None:
        # runs on the worker thread: no session or storage mutation here
        try:
            return self.api.me(token)
        except ApiError as e:
            logger.info("Token verification failed: %s", e.message)
            return None

    def apply_verification(self, wait: bool = False) -> bool:
        """
        Applies a finished background verification to the session and its
        storage. Returns True when the identity was dropped, so the UI can
        redirect to login.
        """
        if self._pending is None:
            return False
        future, token = self._pending
        if not wait and not future.done():
            return False
        self._pending = None

        try:
            user = future.result()
        except Exception:
            logger.exception("Token verification raised")
            user = None

        with self._lock:
            # a newer login or a logout replaced the token while we were checking
            if self.api.token != token:
                return False
            if user is None:
                self._clear()
                return True
            self._store(token, user)
        return False

    # -------------------------------
    # Transitions
    # -------------------------------

    def login(self, email: str, password: str) -> AuthResult:
        return self._authenticate(lambda: self.api.login(email, password), "Login failed. Please try again.")

    def register(self, name: str, email: str, password: str) -> AuthResult:
        return self._authenticate(lambda: self.api.register(name, email, password), "Registration failed. Please try again.")

    def _authenticate(self, call, fallback: str) -> AuthResult:
        self.state = SessionState.AUTHENTICATING
        try:
            data = call()
        except ApiError as e:
            with self._lock:
                self._clear()
            return AuthResult(False, e.message or fallback, e.errors)

        with self._lock:
            self._store(data["token"], data["user"])
        return AuthResult(True)

    def update_user(self, user: dict) -> None:
        with self._lock:
            self.user = user
            self.storage[USER_KEY] = json.dumps(user)
            self._save()

    def logout(self) -> None:
        with self._lock:
            self._clear()

    def handle_unauthorized(self) -> None:
        """Any 401 while signed in drops the identity; the UI sends the user to login."""
        if self.state is SessionState.AUTHENTICATED:
            logger.info("Session expired, signing out")
            with self._lock:
                self._clear()

    # -------------------------------
    # Storage helpers (caller holds the lock)
    # -------------------------------

    def _store(self, token: str, user: dict) -> None:
        self.api.token = token
        self.user = user
        self.state = SessionState.AUTHENTICATED
        self.storage[TOKEN_KEY] = token
        self.storage[USER_KEY] = json.dumps(user)
        self._save()

    def _clear(self) -> None:
        self.api.token = None
        self.user = None
        self.state = SessionState.ANONYMOUS
        for key in (TOKEN_KEY, USER_KEY):
            if key in self.storage:
                del self.storage[key]
        self._save()

    def _save(self) -> None:
        save = getattr(self.storage, "save", None)
        if callable(save):
            save()
