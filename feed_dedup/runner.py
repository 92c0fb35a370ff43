"""
Batch deduplication run orchestration.

This module coordinates a single run:
1. Parse the new items and, optionally, previously accepted items
2. Drop items published before the ingestion window
3. Drop duplicates by raw URL and title similarity
4. Annotate kept items with canonical URL and cleaned title
5. Write kept items and the duplicate report as JSON
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console

from .config import AppConfig
from .core.canonical import canonicalize_url
from .core.dedup import dedup_items
from .core.similarity import clean_title
from .core.types import ContentItem, DedupResult
from .core.window import split_by_window
from .logging_utils import close_logging, log_event, setup_logging
from .parser import item_to_dict, load_items


def run_dedup(
    input_path: Path,
    output_dir: Path,
    cfg: AppConfig,
    existing_path: Path | None = None,
    console: Console | None = None,
    run_id: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Run batch deduplication over a feed export.

    Args:
        input_path: JSON export with the new items
        output_dir: Base directory for run output folders
        cfg: Application configuration
        existing_path: Optional JSON export of items accepted earlier
        console: Rich console for the summary line (creates default if None)
        run_id: Identifier stamped on every log record (generated if None)
        now: Reference time for the ingestion window (current UTC time if None)

    Returns:
        Path to the kept-items JSON file
    """
    run_output_dir = _build_run_output_dir(output_dir, input_path, cfg)
    run_output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(cfg.logging, run_output_dir, run_id=run_id)

    try:
        log_event(
            logger,
            "Run start",
            event="run_start",
            input=str(input_path),
            existing=str(existing_path) if existing_path else None,
            output=str(run_output_dir),
        )

        items = load_items(input_path)
        existing = load_items(existing_path) if existing_path else []

        recent, stale = items, []
        window_hours = cfg.dedup.ingestion_window_hours
        if window_hours is not None:
            recent, stale = split_by_window(items, window_hours, now or datetime.now(timezone.utc))
            for item in stale:
                log_event(
                    logger,
                    "Outside ingestion window",
                    level=logging.DEBUG,
                    event="item_stale",
                    url=item.url,
                    published_at=item.published_at,
                )

        if cfg.dedup.enabled:
            result = dedup_items(recent, cfg.dedup.title_similarity_threshold, existing=existing)
        else:
            result = DedupResult(kept=list(recent))

        for item, match in result.duplicates:
            log_event(
                logger,
                "Duplicate detected",
                level=logging.DEBUG,
                event="duplicate_detected",
                url=item.url,
                title=item.title,
                reason=match.reason,
                score=match.score,
                matched_url=match.existing.url,
            )

        kept_path = run_output_dir / cfg.output.kept_filename
        _write_json(kept_path, [_kept_record(item, cfg) for item in result.kept])

        if cfg.output.write_duplicates:
            duplicates_path = run_output_dir / cfg.output.duplicates_filename
            _write_json(duplicates_path, _duplicate_records(result))

        log_event(
            logger,
            "Run complete",
            event="run_complete",
            output=str(kept_path),
            total=len(items),
            existing_total=len(existing),
            stale=len(stale),
            kept=len(result.kept),
            duplicates=len(result.duplicates),
        )
        _render_stats(len(items), len(stale), result, console or Console())
        return kept_path
    finally:
        close_logging(logger)


def _kept_record(item: ContentItem, cfg: AppConfig) -> dict[str, Any]:
    record = item_to_dict(item)
    record["clean_title"] = clean_title(item.title)
    if cfg.dedup.canonicalize_urls:
        record["canonical_url"] = canonicalize_url(item.url)
    return record


def _duplicate_records(result: DedupResult) -> list[dict[str, Any]]:
    records = []
    for item, match in result.duplicates:
        record = item_to_dict(item)
        record["reason"] = match.reason
        record["score"] = round(match.score, 4)
        record["matched"] = item_to_dict(match.existing)
        records.append(record)
    return records


def _write_json(path: Path, payload: Any) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
        handle.write("\n")


def _render_stats(total: int, stale: int, result: DedupResult, console: Console) -> None:
    """Print the run summary: input count, stale count, kept count and duplicates by reason."""
    url_matches = sum(1 for _, match in result.duplicates if match.reason == "url")
    title_matches = len(result.duplicates) - url_matches
    console.print(
        "[bold]Dedup summary[/bold]: "
        f"total={total}, stale={stale}, kept={len(result.kept)}, "
        f"url_duplicates={url_matches}, title_duplicates={title_matches}"
    )


def _build_run_output_dir(output_dir: Path, input_path: Path, cfg: AppConfig) -> Path:
    """Build the output directory name based on configured mode.

    Args:
        output_dir: Base output directory
        input_path: Path to input file (for extracting stem name)
        cfg: Application configuration

    Returns:
        Path to the run output directory

    Raises:
        ValueError: If run_folder_mode is not supported
    """
    stem = input_path.stem or "run"
    mode = (cfg.output.run_folder_mode or "input").lower()
    if mode == "input":
        run_dir_name = stem
    elif mode == "timestamp":
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        run_dir_name = f"{timestamp}-{stem}"
    elif mode == "input_timestamp":
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        run_dir_name = f"{stem}-{timestamp}"
    else:
        raise ValueError(
            "Unsupported run_folder_mode. Use 'input', 'timestamp', or 'input_timestamp'."
        )
    return output_dir / run_dir_name
