"""Tests for the batch deduplication run."""

from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console

from feed_dedup.config import AppConfig
from feed_dedup.runner import run_dedup


FEED = {
    "items": [
        {
            "id": "1",
            "url": "https://example.com/a?utm_source=x&id=1",
            "title": "Bitcoin rallies past resistance [Video]",
        },
        {"id": "2", "url": "https://example.com/b", "title": "Ether staking yields climb"},
        {"id": "3", "url": "https://example.com/b", "title": "Repost with new title"},
        {"id": "4", "url": "https://other.com/c", "title": "Ether staking yields climb!"},
        {"id": "5", "url": "https://other.com/d", "title": "Already accepted story"},
    ]
}

EXISTING = [{"url": "https://other.com/d", "title": "Something older"}]


def _write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _config() -> AppConfig:
    cfg = AppConfig()
    cfg.logging.console = False
    return cfg


def _run(tmp_path: Path, cfg: AppConfig, existing: bool = True) -> tuple[Path, str]:
    input_path = _write_json(tmp_path / "feed.json", FEED)
    existing_path = _write_json(tmp_path / "accepted.json", EXISTING) if existing else None
    buffer = io.StringIO()
    kept_path = run_dedup(
        input_path,
        tmp_path / "out",
        cfg,
        existing_path=existing_path,
        console=Console(file=buffer, width=200),
    )
    return kept_path, buffer.getvalue()


def test_run_writes_kept_items_and_duplicates(tmp_path: Path):
    kept_path, summary = _run(tmp_path, _config())

    assert kept_path == tmp_path / "out" / "feed" / "items.json"
    kept = json.loads(kept_path.read_text(encoding="utf-8"))
    assert [item["id"] for item in kept] == ["1", "2"]
    assert kept[0]["canonical_url"] == "https://example.com/a?id=1"
    assert kept[0]["clean_title"] == "Bitcoin rallies past resistance"
    assert kept[0]["url"] == "https://example.com/a?utm_source=x&id=1"

    duplicates = json.loads((kept_path.parent / "duplicates.json").read_text(encoding="utf-8"))
    assert [(d["id"], d["reason"]) for d in duplicates] == [
        ("3", "url"),
        ("4", "title"),
        ("5", "url"),
    ]
    assert duplicates[1]["score"] == 1.0
    assert duplicates[2]["matched"] == {"title": "Something older", "url": "https://other.com/d"}

    assert "total=5, stale=0, kept=2, url_duplicates=2, title_duplicates=1" in summary


def test_run_logs_structured_events(tmp_path: Path):
    kept_path, _ = _run(tmp_path, _config())

    lines = (kept_path.parent / "run.jsonl").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]

    assert events[0]["event"] == "run_start"
    assert events[-1]["event"] == "run_complete"
    assert events[-1]["kept"] == 2
    assert events[-1]["duplicates"] == 3
    assert events[-1]["existing_total"] == 1


def test_run_with_dedup_disabled_keeps_everything(tmp_path: Path):
    cfg = _config()
    cfg.dedup.enabled = False

    kept_path, _ = _run(tmp_path, cfg)

    kept = json.loads(kept_path.read_text(encoding="utf-8"))
    assert len(kept) == 5
    assert json.loads((kept_path.parent / "duplicates.json").read_text(encoding="utf-8")) == []


def test_run_respects_threshold_and_output_switches(tmp_path: Path):
    cfg = _config()
    cfg.dedup.title_similarity_threshold = 1.0
    cfg.dedup.canonicalize_urls = False
    cfg.output.write_duplicates = False
    cfg.logging.file = False

    kept_path, _ = _run(tmp_path, cfg, existing=False)

    kept = json.loads(kept_path.read_text(encoding="utf-8"))
    assert [item["id"] for item in kept] == ["1", "2", "5"]
    assert "canonical_url" not in kept[0]
    assert not (kept_path.parent / "duplicates.json").exists()
    assert not (kept_path.parent / "run.jsonl").exists()


def test_run_folder_mode_timestamp(tmp_path: Path):
    cfg = _config()
    cfg.output.run_folder_mode = "input_timestamp"

    kept_path, _ = _run(tmp_path, cfg)

    assert kept_path.parent.name.startswith("feed-")


def test_run_drops_items_outside_ingestion_window(tmp_path: Path):
    feed = {
        "items": [
            {"id": "1", "url": "https://a.com/1", "title": "Fresh story", "publishedAt": "2026-02-08T10:00:00Z"},
            {"id": "2", "url": "https://a.com/2", "title": "Old story", "publishedAt": "2026-02-06T10:00:00Z"},
            {"id": "3", "url": "https://a.com/3", "title": "Undated story"},
            {"id": "4", "url": "https://b.com/4", "title": "Old story", "publishedAt": "2026-02-08T11:00:00Z"},
        ]
    }
    input_path = _write_json(tmp_path / "window.json", feed)
    cfg = _config()
    cfg.dedup.ingestion_window_hours = 24
    buffer = io.StringIO()

    kept_path = run_dedup(
        input_path,
        tmp_path / "out",
        cfg,
        console=Console(file=buffer, width=200),
        now=datetime(2026, 2, 8, 12, 0, tzinfo=timezone.utc),
    )

    kept = json.loads(kept_path.read_text(encoding="utf-8"))
    # the stale item never becomes a match target, so id 4 survives
    assert [item["id"] for item in kept] == ["1", "3", "4"]
    assert "total=4, stale=1, kept=3" in buffer.getvalue()

    events = [
        json.loads(line)
        for line in (kept_path.parent / "run.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert events[-1]["stale"] == 1


def test_run_stamps_one_run_id_on_every_record(tmp_path: Path):
    input_path = _write_json(tmp_path / "feed.json", FEED)
    cfg = _config()
    cfg.logging.level = "DEBUG"

    kept_path = run_dedup(
        input_path,
        tmp_path / "out",
        cfg,
        console=Console(file=io.StringIO()),
        run_id="run-42",
    )

    events = [
        json.loads(line)
        for line in (kept_path.parent / "run.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert {event["run_id"] for event in events} == {"run-42"}
    assert [event["event"] for event in events].count("duplicate_detected") == 2
