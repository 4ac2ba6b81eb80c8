# tests/core/test_config.py
"""Tests for configuration schema and loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestParseByteSize:
    """Byte strings accepted for the advisory partition size."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1024, 1024),
            ("1024", 1024),
            ("16b", 16),
            ("64k", 64 * 1024),
            ("64MB", 64 * 1024 * 1024),
            ("128m", 128 * 1024 * 1024),
            ("1GiB", 1024**3),
            (" 2 tb ", 2 * 1024**4),
        ],
    )
    def test_valid_sizes(self, value: str | int, expected: int) -> None:
        from shuffle_coalesce.core.config import parse_byte_size

        assert parse_byte_size(value) == expected

    @pytest.mark.parametrize("value", ["", "MB", "1.5g", "64 furlongs", "-5m"])
    def test_invalid_sizes(self, value: str) -> None:
        from shuffle_coalesce.core.config import parse_byte_size

        with pytest.raises(ValueError):
            parse_byte_size(value)


class TestCoalesceSettings:
    """Coalesce configuration validation."""

    def test_defaults(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        settings = CoalesceSettings()
        assert settings.enabled is True
        assert settings.advisory_partition_size_bytes == 64 * 1024 * 1024
        assert settings.min_partition_num is None
        assert settings.effective_min_partition_num == 1

    def test_advisory_size_from_byte_string(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        settings = CoalesceSettings(advisory_partition_size_bytes="128MB")
        assert settings.advisory_partition_size_bytes == 128 * 1024 * 1024

    def test_advisory_size_must_be_positive(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        with pytest.raises(ValidationError):
            CoalesceSettings(advisory_partition_size_bytes=0)

    def test_bad_byte_string_is_validation_error(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        with pytest.raises(ValidationError, match="Unknown byte size unit"):
            CoalesceSettings(advisory_partition_size_bytes="64 parsecs")

    def test_min_partition_num_must_be_positive(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        with pytest.raises(ValidationError):
            CoalesceSettings(min_partition_num=0)

    def test_effective_min_partition_num_uses_explicit_value(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        assert CoalesceSettings(min_partition_num=8).effective_min_partition_num == 8

    def test_settings_are_frozen(self) -> None:
        from shuffle_coalesce.core.config import CoalesceSettings

        settings = CoalesceSettings()
        with pytest.raises(ValidationError):
            settings.enabled = False  # type: ignore[misc]


class TestLoggingSettings:
    def test_level_is_normalized(self) -> None:
        from shuffle_coalesce.core.config import LoggingSettings

        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_unknown_level_rejected(self) -> None:
        from shuffle_coalesce.core.config import LoggingSettings

        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")


class TestShuffleCoalesceSettings:
    """Top-level settings validation."""

    def test_all_sections_default(self) -> None:
        from shuffle_coalesce.core.config import ShuffleCoalesceSettings

        settings = ShuffleCoalesceSettings()
        assert settings.coalesce.enabled is True
        assert settings.logging.level == "INFO"

    def test_nested_config(self) -> None:
        from shuffle_coalesce.core.config import ShuffleCoalesceSettings

        settings = ShuffleCoalesceSettings(
            coalesce={"advisory_partition_size_bytes": "1m", "min_partition_num": 4},
            logging={"json_output": True},
        )
        assert settings.coalesce.advisory_partition_size_bytes == 1024 * 1024
        assert settings.coalesce.min_partition_num == 4
        assert settings.logging.json_output is True

    def test_resolve_config_is_json_ready(self) -> None:
        from shuffle_coalesce.core.config import ShuffleCoalesceSettings, resolve_config

        resolved = resolve_config(ShuffleCoalesceSettings())
        assert resolved == {
            "coalesce": {
                "enabled": True,
                "advisory_partition_size_bytes": 64 * 1024 * 1024,
                "min_partition_num": None,
            },
            "logging": {"level": "INFO", "json_output": False},
        }


class TestLoadSettings:
    """Test Dynaconf-based settings loading."""

    def test_load_from_yaml_file(self, tmp_path: Path) -> None:
        from shuffle_coalesce.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
coalesce:
  advisory_partition_size_bytes: 32MB
  min_partition_num: 10
logging:
  level: DEBUG
""")
        settings = load_settings(config_file)
        assert settings.coalesce.advisory_partition_size_bytes == 32 * 1024 * 1024
        assert settings.coalesce.min_partition_num == 10
        assert settings.logging.level == "DEBUG"

    def test_load_with_env_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from shuffle_coalesce.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
coalesce:
  min_partition_num: 10
""")
        monkeypatch.setenv("SHUFFLE_COALESCE_COALESCE__min_partition_num", "3")

        settings = load_settings(config_file)
        assert settings.coalesce.min_partition_num == 3

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        from shuffle_coalesce.core.config import load_settings

        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nonexistent.yaml")

    def test_load_invalid_values_raises(self, tmp_path: Path) -> None:
        from shuffle_coalesce.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
coalesce:
  min_partition_num: -1
""")
        with pytest.raises(ValidationError):
            load_settings(config_file)
