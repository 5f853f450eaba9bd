# server/main.py

import logging
import traceback
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from server.api import auth, profile, tasks
from server.config import Settings
from server.core.security import PasswordHasher, TokenService
from server.database import init_db
from server.errors import AppError, ValidationError
from server.logging_setup import setup_logging
from server.schemas import field_errors


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Builds the API. A missing JWT secret raises ConfigurationError here,
    before any request is served.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title="Task Manager API")
    app.state.settings = settings
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expire)
    app.state.hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.session_factory = init_db(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(profile.router, prefix=settings.api_prefix)
    app.include_router(tasks.router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    def health():
        return {"status": "OK", "message": "Server is running"}

    register_error_handlers(app, settings)
    return app


# -------------------------------
# Error handlers
# -------------------------------

def register_error_handlers(app: FastAPI, settings: Settings) -> None:

    @app.exception_handler(AppError)
    async def app_error(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        error = ValidationError(field_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = "Route not found"
        else:
            message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"message": "Internal Server Error"}
        if settings.development:
            content["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=500, content=content)


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
