import os
from dataclasses import dataclass

DEFAULT_TAG_KEY = "cliche"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    tag_key: str = DEFAULT_TAG_KEY
    log_level: str = DEFAULT_LOG_LEVEL


def get_settings() -> Settings:
    return Settings(
        tag_key=os.getenv("CLICHE_TAG_KEY", DEFAULT_TAG_KEY).strip() or DEFAULT_TAG_KEY,
        log_level=os.getenv("CLICHE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
    )
