"""Settings loader for the command-line tools."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from src.adjustments import PRESETS_BY_ID
from src.pipeline import PipelineConfig
from src.utils.output import OUTPUT_SUFFIXES

logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.json"

ENV_PRESET = "PHOTO_RESTORE_PRESET"
ENV_JPEG_QUALITY = "PHOTO_RESTORE_JPEG_QUALITY"


def load_settings(settings_path: Optional[Path] = None) -> PipelineConfig:
    """Load pipeline settings from settings.json, falling back to environment variables.

    Priority: settings.json > environment variables > PipelineConfig defaults.

    Args:
        settings_path: Path to settings.json. Defaults to project root settings.json.

    Returns:
        PipelineConfig with the resolved values
    """
    path = settings_path or _SETTINGS_FILE
    data: dict = {}

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            logger.debug(f"Loaded settings from {path}")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read settings.json at {path}: {e}")
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings.json at {path}: expected a JSON object")
            data = {}

    def _get(key: str, env_var: str) -> Any:
        v = data.get(key)
        if v is not None and str(v).strip():
            return v
        v = os.getenv(env_var, "")
        if v.strip():
            return v.strip()
        return None

    config = PipelineConfig()

    preset = _get("default_preset", ENV_PRESET)
    if preset is not None:
        if preset in PRESETS_BY_ID:
            config.default_preset = preset
        else:
            logger.warning(
                f"Ignoring unknown preset {preset!r}, using {config.default_preset!r}"
            )

    quality = _get("jpeg_quality", ENV_JPEG_QUALITY)
    if quality is not None:
        try:
            config.jpeg_quality = min(100, max(1, int(quality)))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid JPEG quality {quality!r}")

    output_format = data.get("output_format")
    if output_format is not None:
        if str(output_format).lower() in OUTPUT_SUFFIXES:
            config.output_format = str(output_format).lower()
        else:
            logger.warning(
                f"Ignoring unknown output format {output_format!r}, "
                f"using {config.output_format!r}"
            )

    prefix = data.get("output_prefix")
    if prefix is not None:
        if isinstance(prefix, str):
            config.output_prefix = prefix
        else:
            logger.warning(f"Ignoring non-string output prefix {prefix!r}")

    split = data.get("comparison_split")
    if split is not None:
        try:
            config.comparison_split = min(100.0, max(0.0, float(split)))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid comparison split {split!r}")

    logger.debug(
        f"Settings: preset={config.default_preset}, quality={config.jpeg_quality}, "
        f"format={config.output_format}"
    )

    return config
