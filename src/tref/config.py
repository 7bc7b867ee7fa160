"""
Runtime settings for the ``tref`` command line collaborators.

The core (encoder, identity, models, publisher) never reads settings; every
value it needs is passed explicitly. Only the CLI resolves these from the
environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .models.block import DEFAULT_LICENSE

DEFAULT_PUBLISH_DIR = "./published"


class Settings(BaseModel):
    """Environment-derived defaults for storage and publishing."""

    publish_dir: Path = Field(
        default=Path(DEFAULT_PUBLISH_DIR),
        description="Base directory holding published blocks and the registry index.",
    )
    default_license: str = Field(
        default=DEFAULT_LICENSE,
        description="License stamped on new drafts when none is given.",
    )
    log_level: Optional[str] = Field(
        default=None,
        description="Log level enabled for CLI diagnostics (unset keeps logging silent).",
    )

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get("TREF_PUBLISH_DIR"):
            values["publish_dir"] = Path(env["TREF_PUBLISH_DIR"])
        if env.get("TREF_DEFAULT_LICENSE"):
            values["default_license"] = env["TREF_DEFAULT_LICENSE"].strip()
        if env.get("TREF_LOG_LEVEL"):
            values["log_level"] = env["TREF_LOG_LEVEL"].strip()
        return cls(**values)


def get_settings() -> Settings:
    """Resolve settings from the current process environment."""
    return Settings.from_env()
