"""
Settings for the review API.
Each field can be overridden by an environment variable of the same name.
"""
import os
from dataclasses import dataclass, field, fields
from typing import List


def _coerce(raw: str, annotation):
    if annotation == bool:
        return raw.strip().lower() in ("true", "1", "yes")
    if annotation == int:
        return int(raw)
    if annotation == List[str]:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


@dataclass
class Settings:
    """Review API settings"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # Browsers allowed to call the API
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Review
    INSPECT_PARAMS_FILE: str = ""   # YAML applied under per-request params
    INSPECT_TIMEOUT: int = 30       # seconds of metadata lookups per request

    def __post_init__(self):
        for f in fields(self):
            raw = os.getenv(f.name)
            if raw is not None:
                setattr(self, f.name, _coerce(raw, f.type))


settings = Settings()
