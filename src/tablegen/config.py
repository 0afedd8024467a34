"""
Configuration for the table compiler.

CompilerConfig is a frozen dataclass. Loaders apply the precedence
environment > TOML > defaults; the CLI layers its flags on top.

TOML search order when no explicit path is given:
    1) ./tablegen.toml (either a [tablegen] table or top-level keys)
    2) ./pyproject.toml under [tool.tablegen]

Environment variables:
    - TABLEGEN_INTERFACE_PATH
    - TABLEGEN_PRIMARY_TYPES (comma separated)
    - TABLEGEN_DEFAULT_PRIMARY_TYPE
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from tablegen.codegen import DEFAULT_PRIMARY_TYPE
from tablegen.types import DEFAULT_PRIMARY_TYPES

__all__ = ["DEFAULT_INTERFACE_PATH", "CompilerConfig"]

DEFAULT_INTERFACE_PATH = "introspect::table"


def _split_types(value: Any) -> frozenset[str] | None:
    if isinstance(value, str):
        items = [v.strip() for v in value.split(",")]
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = [str(v).strip() for v in value]
    else:
        return None
    return frozenset(v for v in items if v)


@dataclass(frozen=True)
class CompilerConfig:
    """
    Settings shared by every table compiled in one run.

    Attributes:
        interface_path (str): Path of the table interface module in the
            generated code (e.g. ``introspect::table``).
        primary_types (frozenset[str]): Allow-list of declared types that
            a single leading key member may have to be promoted to the
            primary.
        default_primary_type (str): Primary type emitted for tables that
            are not keyed by a promoted primary.

    Examples:
        >>> CompilerConfig(interface_path="my::table").interface_path
        'my::table'
    """

    interface_path: str = DEFAULT_INTERFACE_PATH
    primary_types: frozenset[str] = field(default=DEFAULT_PRIMARY_TYPES)
    default_primary_type: str = DEFAULT_PRIMARY_TYPE

    @classmethod
    def _apply_mapping(cls, base: CompilerConfig, cfg: dict[str, Any] | None) -> CompilerConfig:
        """Apply a loose config mapping, ignoring unknown or malformed keys."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if isinstance(cfg.get("interface_path"), str) and cfg["interface_path"].strip():
            s = replace(s, interface_path=cfg["interface_path"].strip())
        if "primary_types" in cfg:
            types = _split_types(cfg["primary_types"])
            if types is not None:
                s = replace(s, primary_types=types)
        if isinstance(cfg.get("default_primary_type"), str) and cfg["default_primary_type"].strip():
            s = replace(s, default_primary_type=cfg["default_primary_type"].strip())
        return s

    @classmethod
    def from_env(cls, base: CompilerConfig | None = None, prefix: str = "TABLEGEN_") -> CompilerConfig:
        """Build a config from environment variables on top of ``base``."""
        mapping: dict[str, Any] = {}
        for key in ("interface_path", "primary_types", "default_primary_type"):
            value = os.getenv(prefix + key.upper())
            if value:
                mapping[key] = value
        return cls._apply_mapping(base or cls(), mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> CompilerConfig:
        """
        Build a config from a TOML file.

        Returns defaults when no candidate file exists or none carries a
        tablegen section. An explicit ``path`` that cannot be parsed raises
        ``tomllib.TOMLDecodeError``.
        """
        candidates: list[Path]
        if path is not None:
            candidates = [Path(path)]
        else:
            candidates = [Path.cwd() / "tablegen.toml", Path.cwd() / "pyproject.toml"]

        for p in candidates:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                data = tomllib.load(fh)
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("tablegen") if isinstance(tool, dict) else None
            else:
                cfg = data["tablegen"] if isinstance(data.get("tablegen"), dict) else data
            if cfg:
                return cls._apply_mapping(cls(), cfg)
        return cls()

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> CompilerConfig:
        """Load a config applying precedence: environment > TOML > defaults."""
        return cls.from_env(base=cls.from_toml(path))
