"""
tests/test_config.py
Unit tests for utils/duration.py and utils/config.py.
Run: pytest tests/test_config.py -v
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from utils.config import ScanConfig, ConfigError, load_config
from utils.constants import DEFAULT_TIMEOUT_S, DEFAULT_MAX_CONCURRENT_HOSTS, MAX_TIMEOUT_S
from utils.duration import parse_duration, DurationParseError


# ── Duration strings ──────────────────────────────────────────────────────────

class TestDuration:
    @pytest.mark.parametrize("text,seconds", [
        ("1s", 1.0),
        ("500ms", 0.5),
        ("1.5s", 1.5),
        ("1.5 s", 1.5),
        ("2", 2.0),
        ("1m30s", 90.0),
        ("2min", 120.0),
        ("1h", 3600.0),
        ("250us", 0.00025),
        (" 3sec ", 3.0),
    ])
    def test_valid(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["", "   ", "abc", "5 parsecs", "0s", "-1s", "1s garbage", "s", "\u0665s"])
    def test_invalid(self, text):
        with pytest.raises(DurationParseError):
            parse_duration(text)

    def test_non_string(self):
        with pytest.raises(DurationParseError, match="Expected string"):
            parse_duration(5)


# ── Config file ───────────────────────────────────────────────────────────────

class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "absent.yaml")
        assert cfg == ScanConfig()
        assert cfg.timeout == DEFAULT_TIMEOUT_S
        assert cfg.max_concurrent_hosts == DEFAULT_MAX_CONCURRENT_HOSTS

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ScanConfig()

    def test_values_loaded(self, tmp_path):
        path = tmp_path / "hostsweep.yaml"
        path.write_text(
            "timeout: 250ms\n"
            "max_concurrent_hosts: 4\n"
            "max_concurrent_ports: 16\n"
            "show_closed: true\n"
            "log_level: debug\n"
        )
        cfg = load_config(path)
        assert cfg.timeout == pytest.approx(0.25)
        assert cfg.max_concurrent_hosts == 4
        assert cfg.max_concurrent_ports == 16
        assert cfg.show_closed is True
        assert cfg.log_level == "debug"

    def test_numeric_timeout(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timeout: 3\n")
        assert load_config(path).timeout == 3.0

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timing: insane\n")
        with pytest.raises(ConfigError, match="Unknown config keys"):
            load_config(path)

    def test_bad_timeout_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timeout: soon\n")
        with pytest.raises(ConfigError, match="Invalid timeout"):
            load_config(path)

    def test_zero_concurrency_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("max_concurrent_hosts: 0\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_bad_log_level_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("log_level: LOUD\n")
        with pytest.raises(ConfigError, match="log_level"):
            load_config(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timeout: [1s\n")
        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config(path)

    def test_huge_numeric_timeout_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timeout: 1.0e+11\n")
        with pytest.raises(ConfigError, match="timeout must be in"):
            load_config(path)

    def test_huge_duration_timeout_rejected(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("timeout: 1200000d\n")
        with pytest.raises(ConfigError, match="timeout must be in"):
            load_config(path)


class TestScanConfig:
    def test_one_day_timeout_allowed(self):
        assert ScanConfig(timeout=MAX_TIMEOUT_S).timeout == MAX_TIMEOUT_S

    @pytest.mark.parametrize("timeout", [0, -1, MAX_TIMEOUT_S + 1, 1e11, float("inf"), float("nan")])
    def test_out_of_range_timeout_rejected(self, timeout):
        with pytest.raises(ConfigError):
            ScanConfig(timeout=timeout)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
