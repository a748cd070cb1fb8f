# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )

    # Triggers
    TRIGGER_NAMESPACE: str = Field(
        default="rc", min_length=1, validation_alias="TRIGGER_NAMESPACE"
    )
    POLL_INTERVAL_SECONDS: float = Field(
        default=1.0, gt=0, validation_alias="POLL_INTERVAL_SECONDS"
    )
    BACKEND_TIMEOUT_SECONDS: float = Field(
        default=5.0, gt=0, validation_alias="BACKEND_TIMEOUT_SECONDS"
    )
    SCAN_COUNT: int = Field(default=500, gt=0, validation_alias="SCAN_COUNT")
    # Reference behavior: one malformed key fails the whole discovery call.
    DISCOVERY_STRICT: bool = Field(default=False, validation_alias="DISCOVERY_STRICT")
    REMOVE_AFTER_DISPATCH: bool = Field(
        default=True, validation_alias="REMOVE_AFTER_DISPATCH"
    )
    POLLER_ENABLED: bool = Field(default=True, validation_alias="POLLER_ENABLED")

    # Logging knobs
    LOGGER_NAME: str = "trigger-dispatch"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
