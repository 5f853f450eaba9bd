# server/config.py

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from dotenv import load_dotenv


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str) -> timedelta:
    """
    Parses an expiry such as "7d", "12h", "30m" or "3600" (seconds).
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


@dataclass
class Settings:
    jwt_secret: str | None = None
    jwt_expire: timedelta = timedelta(days=7)
    database_url: str = "sqlite:///./data/app.db"
    environment: str = "production"
    api_prefix: str = ""
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    bcrypt_rounds: int = 12
    log_level: str = "INFO"
    log_file: str | None = None
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_expire=parse_duration(os.getenv("JWT_EXPIRE", "7d")),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./data/app.db"),
            environment=os.getenv("APP_ENV", "production"),
            api_prefix=os.getenv("API_PREFIX", "").rstrip("/"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )
