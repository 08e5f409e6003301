"""
Toolkit Configuration Management
=================================

Centralized configuration for the toolkit using Python dataclasses and
TOML-based persistence. Every tool reads its own table (``[sift]``) plus
the shared ``[global]`` table.

A configuration object is built once per run and never mutated. Command
line flags are layered on top of file values with :meth:`SiftConfig.merged`.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when a configuration value is out of range or malformed."""


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _require_flag(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=True, slots=True)
class SiftConfig:
    """Configuration for Sift -- File Entropy Triage.

    Attributes:
        block_size: Bytes per block for per-block entropy.
        threshold: Block entropy at which the block listing highlights a
            value. Display only; the high-entropy block count always uses
            the fixed 7.0 cutoff.
        show_blocks: Include the per-block listing in human output.
        json_output: Emit one JSON object per file.
        verbose: Raise log verbosity to DEBUG.
        max_workers: Thread pool size for multi-file runs.
        request_timeout: Seconds the async server caller waits for a reply.
        cache_size: Capacity of the server result cache (0 disables it).

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    """

    block_size: int = 256
    threshold: float = 7.0
    show_blocks: bool = False
    json_output: bool = False
    verbose: bool = False
    max_workers: int = 4
    request_timeout: float = 5.0
    cache_size: int = 128

    def __post_init__(self) -> None:
        for name in ("block_size", "max_workers", "cache_size"):
            _require_int(name, getattr(self, name))
        for name in ("threshold", "request_timeout"):
            _require_number(name, getattr(self, name))
        for name in ("show_blocks", "json_output", "verbose"):
            _require_flag(name, getattr(self, name))

        if self.block_size <= 0:
            raise ConfigError(f"block_size must be positive, got {self.block_size}")
        if not 0.0 <= self.threshold <= 8.0:
            raise ConfigError(
                f"threshold must be within [0.0, 8.0], got {self.threshold}"
            )
        if self.max_workers <= 0:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers}")
        if not self.request_timeout > 0:
            raise ConfigError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )
        if self.cache_size < 0:
            raise ConfigError(f"cache_size must be >= 0, got {self.cache_size}")

    def merged(self, **overrides: Any) -> SiftConfig:
        """Return a copy with every non-``None`` override applied.

        Overrides go through the same validation as construction, so a bad
        command line value fails here before any analysis starts.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


# =========================== Global Settings ===============================


@dataclass(frozen=True, slots=True)
class GlobalConfig:
    """Global settings shared across toolkit modules.

    Controls logging verbosity and the optional log file.
    """

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    debug: bool = False
    version: str = "1.0.0"

    def __post_init__(self) -> None:
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigError(f"log_file must be a string, got {self.log_file!r}")
        for name in ("log_json", "debug"):
            _require_flag(name, getattr(self, name))


# =========================== Master Config =================================


@dataclass(frozen=True, slots=True)
class ToolkitConfig:
    """Master configuration aggregating tool-specific and global settings.

    Usage:
        >>> config = ToolkitConfig.load()                  # from default path
        >>> config = ToolkitConfig.load("custom.toml")     # from custom path
        >>> config.sift.block_size
        256
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    sift: SiftConfig = field(default_factory=SiftConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ToolkitConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root. Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ToolkitConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ConfigError: If the file is not valid TOML or a value fails
                validation.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        try:
            with open(config_path, "rb") as fh:
                raw: dict[str, Any] = tomllib.load(fh)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            sift=cls._build_section(SiftConfig, raw.get("sift", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that
        forward-compatible config files do not break older code.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"{cls.__name__} section must be a TOML table, got {data!r}")
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        try:
            return cls(**filtered)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc
