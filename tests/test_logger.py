"""Tests for domcrawl.utils.logger — console lines, timers and crawl log files."""

from __future__ import annotations

import pathlib
import re

import pytest

from domcrawl.utils import logger

_ANSI = re.compile(r"\033\[[0-9;]*m")


def _lines(capsys: pytest.CaptureFixture[str]) -> list[str]:
    """Logged stderr lines with colours removed."""
    return [_ANSI.sub("", line) for line in capsys.readouterr().err.splitlines()]


class TestLogger:
    """Tests for Logger output."""

    def test_line_layout(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = logger.create_logger("Test")
        log.info("Loaded page", {"url": "http://ex.com", "links": 2, "pages": [1, 2, 3]})

        (line,) = _lines(capsys)
        assert re.match(r"^\[\d{2}:\d{2}:\d{2}\.\d{3}\] ℹ \[Test\] Loaded page ", line)
        assert 'url="http://ex.com"' in line
        assert "links=2" in line
        assert "pages=[3 items]" in line

    def test_levels_use_symbols(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = logger.create_logger("Test")
        log.info("loaded")
        log.warn("careful")
        log.error("bad")
        log.debug("detail")
        symbols = [line.split("] ", 1)[1][0] for line in _lines(capsys)]
        assert symbols == ["ℹ", "⚠", "✗", "•"]

    def test_long_values_truncated(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger.create_logger("Test").debug("body", {"html": "x" * 500})
        (line,) = _lines(capsys)
        assert '"' + "x" * 197 + '..."' in line

    def test_timer(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = logger.create_logger("Test")
        log.start_timer("crawl")
        assert log.end_timer("crawl") >= 0

        started, completed = _lines(capsys)
        assert "⏱ [Test] Starting: crawl" in started
        assert "Completed: crawl took" in completed

    def test_timers_are_per_component(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger.create_logger("A").start_timer("crawl")
        assert logger.create_logger("B").end_timer("crawl") == 0.0
        assert logger.create_logger("A").end_timer("crawl") >= 0

    def test_unknown_timer_warns(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = logger.create_logger("Test")
        assert log.end_timer("never") == 0.0
        assert 'Timer "never" was not started' in _lines(capsys)[-1]


class TestLogFile:
    """Tests for start_log_file() / end_log_file()."""

    def test_disabled_by_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
        monkeypatch.delenv("WRITE_TO_FILE", raising=False)
        assert logger.start_log_file("http://ex.com", tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    def test_writes_plain_lines(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
        monkeypatch.setenv("WRITE_TO_FILE", "true")
        path = logger.start_log_file("http://ex.com/a b", tmp_path)
        assert path is not None
        assert path.name.startswith("http___ex.com_a_b_")

        logger.create_logger("Test").info("hello")
        logger.end_log_file()

        text = path.read_text(encoding="utf-8")
        assert "Crawl Log - http://ex.com/a b" in text
        assert "[Test] hello" in text
        assert "\033[" not in text

    def test_nothing_written_after_close(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
        monkeypatch.setenv("WRITE_TO_FILE", "true")
        path = logger.start_log_file("crawl", tmp_path)
        assert path is not None
        logger.end_log_file()
        logger.end_log_file()

        logger.create_logger("Test").info("late")
        assert "late" not in path.read_text(encoding="utf-8")
