"""Configuration loading with priority: env > config file > preset > defaults."""

from __future__ import annotations

import importlib.resources
import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

CONFIG_DIR = Path.home() / ".config" / "cocometa"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

_SECTION = "decoder"
_TRUE_VALUES = frozenset({"1", "true", "yes"})
_FALSE_VALUES = frozenset({"0", "false", "no"})


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise COCOMETA_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("COCOMETA_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _load_preset_data() -> dict[str, object]:
    """Load the bundled preset YAML and return raw dict."""
    ref = importlib.resources.files("cocometa.presets").joinpath("default.yaml")
    text = ref.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if isinstance(data, dict):
        return data
    return {}


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Return the top-level mapping of an existing YAML file (or empty dict)."""
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


def _parse_bool_env(name: str) -> bool | None:
    """Read a boolean env variable; unset or unrecognised values give None."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring {name}={raw!r}: expected true or false.")
    return None


class DecoderConfig(BaseModel):
    """Decoding policy settings.

    ``strict=None`` means "not set at this level"; :meth:`merge` lets a lower
    priority source fill it in.
    """

    strict: bool | None = None

    @property
    def is_strict(self) -> bool:
        """Effective strictness (unset counts as lenient)."""
        return bool(self.strict)

    @classmethod
    def _from_decoder_section(cls, data: dict[str, object]) -> DecoderConfig:
        """Build from a raw YAML top-level dict (reads the ``decoder`` key)."""
        section = data.get(_SECTION, {})
        if not isinstance(section, dict):
            return cls()
        try:
            return cls(**{k: v for k, v in section.items() if k in cls.model_fields})
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {_SECTION!r} config section: {e}")
            return cls()

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> DecoderConfig:
        """Load config from a YAML file.  Returns empty config if file is missing."""
        if not path.is_file():
            return cls()
        logger.trace(f"Loading config from {path}")
        data = _load_raw_yaml(path)
        return cls._from_decoder_section(data)

    @classmethod
    def from_env(cls) -> DecoderConfig:
        """Build config from environment variables."""
        return cls(strict=_parse_bool_env("COCOMETA_STRICT"))

    def merge(self, override: DecoderConfig) -> DecoderConfig:
        """Return a new config where values set in *override* take priority."""
        return DecoderConfig(
            strict=override.strict if override.strict is not None else self.strict,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> DecoderConfig:
        """Merge preset, file, and env: preset < file < env."""
        preset_cfg = cls._from_decoder_section(_load_preset_data())
        file_cfg = cls.from_file(get_config_path(config_path))
        env_cfg = cls.from_env()
        return preset_cfg.merge(file_cfg).merge(env_cfg)
