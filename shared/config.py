"""
elfscope Configuration Management
==================================

Centralized configuration for elfscope using Python dataclasses and
TOML-based persistence.  Settings live in two tables::

    [global]            # logging and worker pool
    log_level = "INFO"
    max_workers = 4

    [inspect]           # file intake and rendering
    max_file_size = 268435456
    show_sections = true

The decoding core takes no configuration; only the engine, console output
and CLI read these values.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "elfscope.toml"

OUTPUT_FORMATS: tuple[str, ...] = ("console", "json")


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging verbosity and concurrency settings."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    max_workers: int = 4
    debug: bool = False


@dataclass(frozen=False, slots=True)
class InspectConfig:
    """File intake limits and which decoded tables to render."""

    max_file_size: int = 268_435_456  # 256 MiB
    show_header: bool = True
    show_segments: bool = True
    show_sections: bool = True
    output_format: str = "console"


@dataclass(frozen=False, slots=True)
class ScopeConfig:
    """Master configuration aggregating every settings table.

    Usage:
        >>> config = ScopeConfig.load()                 # from default path
        >>> config = ScopeConfig.load("custom.toml")    # from custom path
        >>> config.inspect.max_file_size
        268435456
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    inspect: InspectConfig = field(default_factory=InspectConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ScopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``elfscope.toml`` in the
        project root and falls back to defaults when it is absent.  Missing
        keys take their dataclass defaults.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does
                not exist.
            ValueError: If the file is not valid TOML or names an unknown
                ``output_format``.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        inspect = cls._build_section(InspectConfig, raw.get("inspect", {}))
        if inspect.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"unknown output_format {inspect.output_format!r} "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            inspect=inspect,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate dataclass *cls* from the keys it declares.

        Unknown keys are ignored so newer config files still load.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def get_config(path: str | Path | None = None) -> ScopeConfig:
    """Module-level wrapper around :meth:`ScopeConfig.load`.

    Caches the result so repeated calls share one instance; passing a
    *path* forces a reload.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = ScopeConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
