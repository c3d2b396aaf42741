# File: src/mstair/textdump/xlogging/test_logger_util.py
"""
Tests for LogLevelConfig and the LOG_LEVEL* variable parser.

Covers:
- parse_log_variable on single variables
- LOG_LEVEL / LOG_LEVELS DSL and LOG_LEVEL_<NAME> overrides
- Precedence: exact > ancestor > glob > default
- Singleton and reload behavior
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from mstair.textdump.xlogging import logger_util as lu
from mstair.textdump.xlogging.logger_constants import TRACE
from mstair.textdump.xlogging.logger_util import LogLevelConfig, LogPatternLevel, parse_log_variable


# ---------- Fixtures ----------


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear LOG_LEVEL* vars and the singleton; never read a .env file."""
    monkeypatch.setattr(lu, "fs_load_dotenv", lambda *a, **k: False)
    for key in [k for k in os.environ if k.startswith("LOG_LEVEL")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(lu, "_log_level_config_instance", None, raising=False)
    yield


LEVELS = {"TRACE": TRACE, "DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARNING": logging.WARNING}


# ---------- parse_log_variable ----------


class TestParseLogVariable:
    def test_bare_level_is_default(self) -> None:
        assert list(parse_log_variable("LOG_LEVEL", "DEBUG", LEVELS)) == [LogPatternLevel("", logging.DEBUG)]

    def test_scoped_variable(self) -> None:
        pairs = list(parse_log_variable("LOG_LEVEL_MSTAIR_TEXTDUMP", "script_cache:TRACE; INFO", LEVELS))
        assert pairs == [
            LogPatternLevel("mstair.textdump.script_cache", TRACE),
            LogPatternLevel("mstair.textdump", logging.INFO),
        ]

    def test_unrelated_variable_ignored(self) -> None:
        assert list(parse_log_variable("LOGLEVEL", "DEBUG", LEVELS)) == []

    def test_unknown_level_skipped(self) -> None:
        assert list(parse_log_variable("LOG_LEVELS", "a:LOUD, b:INFO", LEVELS)) == [
            LogPatternLevel("b", logging.INFO)
        ]


# ---------- LOG_LEVELS DSL ----------


class TestDSL:
    @pytest.mark.parametrize(
        "value",
        [
            "mstair.*:DEBUG;other.*:INFO",
            "mstair.*=DEBUG, other.*=INFO",
            "mstair.*:DEBUG other.*:INFO",
            '"mstair.*":"DEBUG"; other.*:INFO',
        ],
    )
    def test_separators_and_quotes(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("LOG_LEVELS", value)
        cfg = LogLevelConfig()
        assert cfg.pattern_to_level == {"mstair.*": logging.DEBUG, "other.*": logging.INFO}

    def test_root_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVELS", "root=ERROR; mstair=INFO")
        cfg = LogLevelConfig()
        assert cfg.get_effective_level("mstair.textdump") == logging.INFO
        assert cfg.get_effective_level("elsewhere") == logging.ERROR

    def test_empty_and_malformed_fragments(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVELS", ";;pkg.*:DEBUG;;bad:DEBUG:extra")
        assert list(LogLevelConfig().pattern_to_level) == ["pkg.*"]

    def test_numeric_level_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "10")
        assert LogLevelConfig().get_effective_level("x") == logging.WARNING

    def test_trace_level_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "mstair.textdump.dump_state:TRACE")
        assert LogLevelConfig().get_effective_level("mstair.textdump.dump_state") == TRACE


# ---------- Per-logger variables ----------


class TestPerLoggerVariables:
    def test_override_beats_glob(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.*:DEBUG")
        monkeypatch.setenv("LOG_LEVEL_MSTAIR_TEXTDUMP_SCRIPT__CACHE", "ERROR")
        cfg = LogLevelConfig()
        assert cfg.get_effective_level("mstair.textdump.script_cache") == logging.ERROR
        assert cfg.get_effective_level("mstair.textdump.dump_state") == logging.DEBUG

    def test_double_underscore_escape(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL_DUMP__STATE", "DEBUG")
        cfg = LogLevelConfig()
        assert cfg.get_effective_level("dump_state") == logging.DEBUG
        assert cfg.get_effective_level("dump.state") == logging.WARNING

    def test_root_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL_ROOT", "ERROR")
        assert LogLevelConfig().get_effective_level("unmatched") == logging.ERROR


# ---------- Matching ----------


class TestMatching:
    @pytest.mark.parametrize(
        ("levels", "name", "expected"),
        [
            ("mstair.textdump:DEBUG", "mstair.textdump", logging.DEBUG),
            ("mstair.textdump:DEBUG", "mstair.textdump.dump_api", logging.DEBUG),
            ("mstair.textdump:DEBUG", "mstair.other", logging.WARNING),
            ("pkg?:DEBUG", "pkg1", logging.DEBUG),
            ("pkg?:DEBUG", "pkg12", logging.WARNING),
            ("pkg[123]:DEBUG", "pkg9", logging.WARNING),
            ("MSTAIR.*:DEBUG", "mstair.textdump", logging.DEBUG),
            ("mstair.*:DEBUG; mstair.textdump:ERROR", "mstair.textdump.errors", logging.ERROR),
            ("m*:DEBUG; mstair*:INFO", "mstair.textdump", logging.INFO),
            ("INFO; m*:DEBUG", "zzz", logging.INFO),
        ],
    )
    def test_effective_level(self, monkeypatch: pytest.MonkeyPatch, levels: str, name: str, expected: int) -> None:
        monkeypatch.setenv("LOG_LEVELS", levels)
        assert LogLevelConfig().get_effective_level(name) == expected


# ---------- Lifecycle ----------


class TestLifecycle:
    def test_update_replaces_patterns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "pkg1.*:DEBUG")
        cfg = LogLevelConfig()
        monkeypatch.setenv("LOG_LEVEL", "pkg2.*:INFO")
        cfg.update_from_environment()
        assert list(cfg.pattern_to_level) == ["pkg2.*"]

    def test_singleton_reads_environment_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        first = LogLevelConfig.get_instance()
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert LogLevelConfig.get_instance() is first
        assert first.get_effective_level("x") == logging.INFO


# End of file: src/mstair/textdump/xlogging/test_logger_util.py
