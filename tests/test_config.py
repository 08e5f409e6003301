"""Tests for shared.config."""

from __future__ import annotations

import dataclasses

import pytest

from shared.config import ConfigError, GlobalConfig, SiftConfig, ToolkitConfig


class TestSiftConfig:
    def test_defaults(self) -> None:
        cfg = SiftConfig()
        assert cfg.block_size == 256
        assert cfg.threshold == 7.0
        assert not cfg.show_blocks and not cfg.json_output and not cfg.verbose

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"block_size": 0},
            {"block_size": -5},
            {"block_size": 1.5},
            {"block_size": True},
            {"threshold": -0.1},
            {"threshold": 8.01},
            {"max_workers": 0},
            {"request_timeout": 0},
            {"cache_size": -1},
            {"threshold": "high"},
            {"threshold": float("nan")},
            {"max_workers": "4"},
            {"max_workers": 2.5},
            {"request_timeout": "5"},
            {"cache_size": 1.5},
            {"show_blocks": "yes"},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(ConfigError):
            SiftConfig(**kwargs)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            SiftConfig(block_size=0)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            SiftConfig().block_size = 1  # type: ignore[misc]

    def test_merged_skips_none(self) -> None:
        base = SiftConfig(block_size=512, threshold=7.5)
        merged = base.merged(block_size=None, threshold=6.0, show_blocks=True)
        assert merged.block_size == 512
        assert merged.threshold == 6.0
        assert merged.show_blocks
        assert base.threshold == 7.5

    def test_merged_validates(self) -> None:
        with pytest.raises(ConfigError):
            SiftConfig().merged(block_size=0)


class TestGlobalConfig:
    def test_bad_log_level(self) -> None:
        with pytest.raises(ConfigError):
            GlobalConfig(log_level="LOUD")

    def test_log_level_case_insensitive(self) -> None:
        assert GlobalConfig(log_level="debug").log_level == "debug"


class TestToolkitConfigLoad:
    def test_load_tables(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text(
            '[global]\nlog_level = "INFO"\nlog_json = true\n\n'
            "[sift]\nblock_size = 1024\nthreshold = 7.5\nshow_blocks = true\n",
            encoding="utf-8",
        )
        cfg = ToolkitConfig.load(path)
        assert cfg.global_settings.log_level == "INFO"
        assert cfg.global_settings.log_json
        assert cfg.sift.block_size == 1024
        assert cfg.sift.threshold == 7.5
        assert cfg.sift.show_blocks
        assert cfg.sift.cache_size == 128

    def test_unknown_keys_ignored(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text("[sift]\nblock_size = 64\nfuture_option = 1\n[other]\nx = 1\n", encoding="utf-8")
        assert ToolkitConfig.load(path).sift.block_size == 64

    def test_invalid_value_in_file(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text("[sift]\nblock_size = 0\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ToolkitConfig.load(path)

    def test_malformed_toml(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text("[sift\nblock_size = ", encoding="utf-8")
        with pytest.raises(ConfigError):
            ToolkitConfig.load(path)

    def test_explicit_missing_path(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            ToolkitConfig.load(tmp_path / "absent.toml")

    def test_to_dict(self) -> None:
        data = ToolkitConfig().to_dict()
        assert data["sift"]["block_size"] == 256
        assert data["global_settings"]["log_level"] == "WARNING"

    def test_non_numeric_threshold_in_file(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text('[sift]\nthreshold = "high"\n', encoding="utf-8")
        with pytest.raises(ConfigError, match="threshold"):
            ToolkitConfig.load(path)

    def test_wrongly_typed_global_value(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text("[global]\nlog_level = 10\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ToolkitConfig.load(path)

    def test_section_must_be_a_table(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_text("sift = 3\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ToolkitConfig.load(path)

    def test_undecodable_file(self, tmp_path) -> None:
        path = tmp_path / "sift.toml"
        path.write_bytes(b"[sift]\nblock_size = 64 # \xff\xfe\n")
        with pytest.raises(ConfigError):
            ToolkitConfig.load(path)
