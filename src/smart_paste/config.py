"""Shared configuration for the smart-paste pipeline."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

logger = logging.getLogger(__name__)

# Grids above this many cells are rejected, never truncated
MAX_TABLE_CELLS = 2000

# In-memory temporary image storage limit (50 MB)
DEFAULT_MAX_IMAGE_BYTES = 50 * 1024 * 1024


class PasteSettings(BaseModel):
    """Per-editor switches read from the environment."""

    basic_mode: bool = False  # no special handling at all, host pastes as usual
    force_pdf_clean: bool = False  # skip the should_clean pre-check
    max_image_bytes: int = Field(default=DEFAULT_MAX_IMAGE_BYTES, gt=0)


def _env_flag(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable ("1", "true", "yes", "on")."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> PasteSettings:
    """Build PasteSettings from SMART_PASTE_* environment variables.

    An invalid value is logged and replaced by its default; it never raises.
    """
    raw = {
        "basic_mode": _env_flag("SMART_PASTE_BASIC_MODE"),
        "force_pdf_clean": _env_flag("SMART_PASTE_FORCE_PDF_CLEAN"),
        "max_image_bytes": os.getenv("SMART_PASTE_MAX_IMAGE_BYTES"),
    }
    values = {name: value for name, value in raw.items() if value is not None}
    try:
        return PasteSettings(**values)
    except ValidationError as exc:
        invalid = {error["loc"][0] for error in exc.errors()}
        logger.warning("Ignoring invalid SMART_PASTE_* settings %s; using defaults", sorted(invalid))
        return PasteSettings(**{name: value for name, value in values.items() if name not in invalid})
