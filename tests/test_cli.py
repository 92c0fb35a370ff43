"""Tests for the Typer command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from feed_dedup.cli import app


runner = CliRunner()

EXISTING = [
    {"url": "https://example.com/article-1", "title": "First article about technology"},
    {"url": "https://example.com/article-2", "title": "Second article about business"},
]


def _existing_file(tmp_path: Path) -> Path:
    path = tmp_path / "accepted.json"
    path.write_text(json.dumps(EXISTING), encoding="utf-8")
    return path


def test_check_reports_url_duplicate(tmp_path: Path):
    result = runner.invoke(
        app,
        ["check", "https://example.com/article-1", "Unrelated title", "-e", str(_existing_file(tmp_path))],
    )

    assert result.exit_code == 1
    assert "duplicate" in result.output
    assert "reason=url" in result.output


def test_check_uses_threshold_override(tmp_path: Path):
    args = [
        "check",
        "https://new.com/x",
        "First article about technology news",
        "-e",
        str(_existing_file(tmp_path)),
    ]

    assert runner.invoke(app, args).exit_code == 0
    assert runner.invoke(app, args + ["--threshold", "0.5"]).exit_code == 1


def test_check_reads_threshold_from_config(tmp_path: Path):
    config = tmp_path / "config.yaml"
    config.write_text("dedup:\n  title_similarity_threshold: 0.5\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "check",
            "https://new.com/x",
            "First article about technology news",
            "-e",
            str(_existing_file(tmp_path)),
            "-c",
            str(config),
        ],
    )

    assert result.exit_code == 1
    assert "reason=title" in result.output


def test_check_new_item(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "check",
            "https://new-site.com/unique-article",
            "Completely unique headline about different topic",
            "-e",
            str(_existing_file(tmp_path)),
        ],
    )

    assert result.exit_code == 0
    assert "new" in result.output


def test_threshold_out_of_range_is_rejected(tmp_path: Path):
    result = runner.invoke(
        app,
        ["check", "https://a.com", "t", "-e", str(_existing_file(tmp_path)), "--threshold", "1.5"],
    )

    assert result.exit_code == 2


def test_canonicalize_prints_each_url():
    result = runner.invoke(
        app,
        ["canonicalize", "https://example.com/a?utm_source=x&id=1", "not-a-valid-url"],
    )

    assert result.exit_code == 0
    assert result.output.splitlines() == ["https://example.com/a?id=1", "not-a-valid-url"]


def test_run_writes_output(tmp_path: Path):
    feed = tmp_path / "feed.json"
    feed.write_text(
        json.dumps(
            [
                {"url": "https://example.com/article-1", "title": "Old story again"},
                {"url": "https://example.com/new", "title": "A new story"},
            ]
        ),
        encoding="utf-8",
    )
    out = tmp_path / "out"

    result = runner.invoke(
        app,
        [
            "run",
            "-i",
            str(feed),
            "-o",
            str(out),
            "-e",
            str(_existing_file(tmp_path)),
            "--no-log-file",
            "--log-level",
            "WARNING",
        ],
    )

    assert result.exit_code == 0, result.output
    kept = json.loads((out / "feed" / "items.json").read_text(encoding="utf-8"))
    assert [item["url"] for item in kept] == ["https://example.com/new"]
    assert not (out / "feed" / "run.jsonl").exists()


def test_run_rejects_non_positive_window(tmp_path: Path):
    feed = tmp_path / "feed.json"
    feed.write_text("[]", encoding="utf-8")

    result = runner.invoke(app, ["run", "-i", str(feed), "-o", str(tmp_path), "--window-hours", "0"])

    assert result.exit_code == 2
