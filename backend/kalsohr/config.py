import json
import os
import threading
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()

# Roles whose permissions always stay at full access
DEFAULT_PROTECTED_ROLE_CODES: tuple[str, ...] = ("org_admin",)


class Settings(BaseModel):
    app_name: str = Field(default="KalsoHR Permissions")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    allowed_origins: list[str] = Field(default_factory=list)
    protected_role_codes: list[str] = Field(default_factory=lambda: list(DEFAULT_PROTECTED_ROLE_CODES))

    @classmethod
    def from_env(cls) -> "Settings":
        raw_allowed_origins = os.getenv("ALLOWED_ORIGINS", "").strip()

        # Support both CSV format and JSON array format
        allowed_origins: list[str] = []
        if raw_allowed_origins.startswith("["):
            # JSON array format: ["http://localhost:3000", "http://localhost:8080"]
            try:
                parsed_list = json.loads(raw_allowed_origins)
                if not isinstance(parsed_list, list):
                    raise ValueError("ALLOWED_ORIGINS JSON must be an array")
                allowed_origins = [
                    origin.strip() for origin in parsed_list if isinstance(origin, str) and origin.strip()
                ]
            except json.JSONDecodeError as exc:
                raise ValueError(f"ALLOWED_ORIGINS JSON is malformed: {exc}") from exc
        elif raw_allowed_origins:
            # CSV format: http://localhost:3000,http://localhost:8080
            allowed_origins = [
                origin.strip() for origin in raw_allowed_origins.split(",") if origin.strip()
            ]

        if "*" in allowed_origins:
            raise ValueError(
                "ALLOWED_ORIGINS cannot contain '*' when credentialed requests are used"
            )

        for origin in allowed_origins:
            parsed = urlparse(origin)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ValueError(
                    "ALLOWED_ORIGINS must contain valid http/https origins with host"
                )

        raw_protected = os.getenv("PROTECTED_ROLE_CODES")
        if raw_protected is None:
            protected_role_codes = list(DEFAULT_PROTECTED_ROLE_CODES)
        else:
            protected_role_codes = [
                code.strip() for code in raw_protected.split(",") if code.strip()
            ]

        raw_debug = os.getenv("DEBUG", "false").strip().lower()
        if raw_debug in {"1", "true", "yes", "on"}:
            debug = True
        elif raw_debug in {"0", "false", "no", "off", ""}:
            debug = False
        else:
            raise ValueError("DEBUG must be a boolean value")

        return cls(
            app_name=os.getenv("APP_NAME", cls.model_fields["app_name"].default),
            debug=debug,
            log_level=os.getenv("LOG_LEVEL", cls.model_fields["log_level"].default).strip().upper(),
            allowed_origins=allowed_origins,
            protected_role_codes=protected_role_codes,
        )


# Deferred settings initialization to avoid import-time side effects
_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get settings instance, creating it on first access.

    Uses double-checked locking so concurrent first access builds Settings once.

    Returns:
        Settings instance

    Raises:
        ValueError: If environment variables are invalid
    """
    global _settings_instance

    if _settings_instance is not None:
        return _settings_instance

    with _settings_lock:
        if _settings_instance is None:
            _settings_instance = Settings.from_env()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class _SettingsProxy:
    """Proxy to defer settings creation until first attribute access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]
