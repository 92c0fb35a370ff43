"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- DedupConfig: Duplicate detection settings
- OutputConfig: Output file settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


RUN_FOLDER_MODES = ("input", "timestamp", "input_timestamp")
LOG_FORMATS = ("jsonl", "plain")


@dataclass
class DedupConfig:
    """Configuration for duplicate detection.

    Attributes:
        enabled: Whether to drop duplicates; when False every item is kept
        title_similarity_threshold: Jaccard threshold (0-1) for title matches
        canonicalize_urls: Whether kept items are annotated with their canonical URL
        ingestion_window_hours: Drop items published earlier than this many hours
                                before the run; None keeps every item
    """

    enabled: bool = True
    title_similarity_threshold: float = 0.85
    canonicalize_urls: bool = True
    ingestion_window_hours: float | None = None


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        run_folder_mode: How to name output folders ("input", "timestamp", "input_timestamp")
        kept_filename: Name of the JSON file listing kept items
        duplicates_filename: Name of the JSON file listing dropped items
        write_duplicates: Whether to write the duplicates report
    """

    run_folder_mode: str = "input"
    kept_filename: str = "items.json"
    duplicates_filename: str = "duplicates.json"
    write_duplicates: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    dedup: DedupConfig = field(default_factory=DedupConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Raises:
        ValueError: If a configured value is out of range or unsupported
    """
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Check config values the pipeline cannot run with.

    Raises:
        ValueError: On the first invalid value found
    """
    threshold = cfg.dedup.title_similarity_threshold
    if not _is_number(threshold) or not 0.0 <= threshold <= 1.0:
        raise ValueError(
            f"dedup.title_similarity_threshold must be a number between 0 and 1, got {threshold!r}"
        )
    window = cfg.dedup.ingestion_window_hours
    if window is not None and (not _is_number(window) or window <= 0):
        raise ValueError(
            f"dedup.ingestion_window_hours must be a positive number or null, got {window!r}"
        )
    if cfg.output.run_folder_mode not in RUN_FOLDER_MODES:
        raise ValueError(
            "Unsupported output.run_folder_mode. Use 'input', 'timestamp', or 'input_timestamp'."
        )
    if cfg.logging.format not in LOG_FORMATS:
        raise ValueError("Unsupported logging.format. Use 'jsonl' or 'plain'.")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _merge_config(base: AppConfig, raw: Any) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Raises:
        ValueError: If the document or a known section is not a mapping
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a mapping of sections, got {type(raw).__name__}")
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if value is None:
            continue
        if not isinstance(value, dict):
            raise ValueError(f"Config section '{key}' must be a mapping, got {type(value).__name__}")
        data[key].update(value)
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "dedup": {
            "enabled": cfg.dedup.enabled,
            "title_similarity_threshold": cfg.dedup.title_similarity_threshold,
            "canonicalize_urls": cfg.dedup.canonicalize_urls,
            "ingestion_window_hours": cfg.dedup.ingestion_window_hours,
        },
        "output": {
            "run_folder_mode": cfg.output.run_folder_mode,
            "kept_filename": cfg.output.kept_filename,
            "duplicates_filename": cfg.output.duplicates_filename,
            "write_duplicates": cfg.output.write_duplicates,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary.

    Raises:
        ValueError: If a section holds a key its dataclass does not define
    """
    try:
        return AppConfig(
            dedup=DedupConfig(**data["dedup"]),
            output=OutputConfig(**data["output"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except TypeError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc
