"""
Configuration validation utilities.

This module turns the raw `[monitor]` tables of `config.toml` into a
validated MonitorConfig.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import MonitorConfig, StorageConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Missing sections and keys fall back to the MonitorConfig defaults.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    general_settings = monitor_data.get("general", {})
    collection_settings = monitor_data.get("collection", {})
    storage_settings = monitor_data.get("storage", {})

    # Validate general settings
    proc_root_value = general_settings.get("proc_root", "/proc")
    if not isinstance(proc_root_value, str) or not proc_root_value.strip():
        raise ValidationError(
            "monitor.general.proc_root must be a non-empty string",
            field_name="monitor.general.proc_root",
            value=proc_root_value,
        )
    proc_root = Path(proc_root_value)

    log_level = validate_enum_choice(
        general_settings.get("log_level", "INFO"),
        valid_choices=LOG_LEVELS,
        field_name="monitor.general.log_level",
        case_sensitive=False,
    )

    require_root = validate_boolean(
        general_settings.get("require_root", True),
        field_name="monitor.general.require_root",
    )

    # Validate collection settings; a timeout of 0 disables the deadline
    read_timeout = validate_positive_float(
        collection_settings.get("read_timeout_seconds", 0),
        min_value=0.0,
        max_value=3600.0,
        field_name="monitor.collection.read_timeout_seconds",
    )

    skip_stale_regions = validate_boolean(
        collection_settings.get("skip_stale_regions", True),
        field_name="monitor.collection.skip_stale_regions",
    )

    capture_chunks = validate_boolean(
        collection_settings.get("capture_chunks", False),
        field_name="monitor.collection.capture_chunks",
    )

    try:
        storage = StorageConfig.from_dict(storage_settings)
    except ValueError as e:
        raise ValidationError(
            f"Invalid monitor.storage settings: {e}",
            field_name="monitor.storage",
            value=storage_settings,
        ) from e

    config = MonitorConfig(
        proc_root=proc_root,
        log_level=log_level,
        require_root=require_root,
        read_timeout_seconds=read_timeout or None,
        skip_stale_regions=skip_stale_regions,
        capture_chunks=capture_chunks,
        storage=storage,
    )
    logger.debug(f"Validated monitor configuration: {config}")
    return config
