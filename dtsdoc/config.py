"""Configuration loading for dtsdoc (.dtsdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".dtsdoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TransformConfig:
    """Names the flattener treats specially while walking a project."""

    namespace_prefix: str = "chrome."
    # "Event" is included as TypeDoc sometimes flattens "events.Event".
    event_types: List[str] = field(
        default_factory=lambda: ["CustomChromeEvent", "events.Event", "Event"]
    )
    custom_event_types: List[str] = field(default_factory=lambda: ["CustomChromeEvent"])
    async_types: List[str] = field(default_factory=lambda: ["Promise"])


@dataclass
class TypeDocConfig:
    """Options passed to the TypeDoc CLI when parsing .d.ts sources."""

    command: List[str] = field(default_factory=lambda: ["npx", "typedoc"])
    tsconfig: Optional[str] = None
    exclude_internal: bool = True
    exclude_private: bool = True
    exclude_protected: bool = True
    extra_args: List[str] = field(default_factory=list)


@dataclass
class DtsDocConfig:
    """Represents the settings defined in .dtsdoc.yml."""

    root: Path
    transform: TransformConfig = field(default_factory=TransformConfig)
    typedoc: TypeDocConfig = field(default_factory=TypeDocConfig)
    output: Optional[Path] = None


def load_config(config_path: Path) -> DtsDocConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DtsDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    transform = TransformConfig()
    prefix = _as_str(data.get("namespace_prefix"))
    if prefix is not None:
        transform.namespace_prefix = prefix
    events = _as_dict(data.get("events"))
    if "marker_types" in events:
        transform.event_types = _as_str_list(events.get("marker_types"))
    if "custom_types" in events:
        transform.custom_event_types = _as_str_list(events.get("custom_types"))
    if "async_return_types" in data:
        transform.async_types = _as_str_list(data.get("async_return_types"))

    typedoc = TypeDocConfig()
    typedoc_data = _as_dict(data.get("typedoc"))
    if typedoc_data:
        command = _as_str_list(typedoc_data.get("command"))
        if command:
            typedoc.command = command
        typedoc.tsconfig = _as_str(typedoc_data.get("tsconfig"))
        for key in ("exclude_internal", "exclude_private", "exclude_protected"):
            value = _as_bool(typedoc_data.get(key))
            if value is not None:
                setattr(typedoc, key, value)
        typedoc.extra_args = _as_str_list(typedoc_data.get("extra_args"))

    output_str = _as_str(data.get("output"))
    output = root / output_str if output_str else None

    return DtsDocConfig(root=root, transform=transform, typedoc=typedoc, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DtsDocConfig",
    "TransformConfig",
    "TypeDocConfig",
    "load_config",
]
