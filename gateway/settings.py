"""Environment-driven gateway settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def _origins() -> List[str]:
    return [origin.strip() for origin in os.getenv("TRICKRACE_ALLOWED_ORIGINS", "*").split(",") if origin.strip()]


def _snapshot_dir() -> Optional[Path]:
    value = os.getenv("TRICKRACE_SNAPSHOT_DIR")
    return Path(value) if value else None


@dataclass
class Settings:
    host: str = field(default_factory=lambda: os.getenv("TRICKRACE_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("TRICKRACE_PORT", "1234")))
    allowed_origins: List[str] = field(default_factory=_origins)
    snapshot_dir: Optional[Path] = field(default_factory=_snapshot_dir)
    log_level: str = field(default_factory=lambda: os.getenv("TRICKRACE_LOG_LEVEL", "INFO"))
