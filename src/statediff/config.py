"""
Configuration for statediff.

Defines Settings, a frozen dataclass carrying the runtime knobs of the decoder and the
renderers. Defaults come from statediff.core.constants (the single source of truth).

Source of truth
- statediff.core.constants.NETWORK_PREFIX, HAMT_BIT_WIDTH, JSON_INDENT

Import DAG discipline
- Depends only on stdlib and statediff.core.constants.
- Imported by statediff.decode and statediff.codec; never imports them.

Notes
- network only changes how addresses are rendered ("f" mainnet, "t" testnets).
- hamt_bit_width is the fan-out assumed for every actor HAMT; v0 state always uses 5.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .core.constants import HAMT_BIT_WIDTH as CORE_HAMT_BIT_WIDTH
from .core.constants import JSON_INDENT as CORE_JSON_INDENT
from .core.constants import NETWORK_PREFIX as CORE_NETWORK_PREFIX
from .core.constants import NETWORK_PREFIXES

__all__ = [
    "Settings",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for decoding and rendering.

    Attributes:
        network (str): Address network prefix, "f" or "t".
        hamt_bit_width (int): log2 fan-out of actor HAMTs (1-8).
        json_indent (int): Indentation used by the JSON renderer (>= 0).

    Examples:
        >>> Settings(network="t").network
        't'
    """

    network: str = CORE_NETWORK_PREFIX
    hamt_bit_width: int = CORE_HAMT_BIT_WIDTH
    json_indent: int = CORE_JSON_INDENT

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: Settings, cfg: dict[str, Any] | None) -> Settings:
        """Apply a loose config mapping onto Settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        # network
        if "network" in cfg and isinstance(cfg["network"], str):
            net = cfg["network"].strip().lower()
            if net in NETWORK_PREFIXES:
                s = replace(s, network=net)
            else:
                logger.warning("ignoring unknown network prefix %r", cfg["network"])

        # hamt_bit_width
        if "hamt_bit_width" in cfg:
            try:
                width = int(cfg["hamt_bit_width"])
            except (TypeError, ValueError):
                logger.warning("ignoring non-integer hamt_bit_width %r", cfg["hamt_bit_width"])
            else:
                if 1 <= width <= 8:
                    s = replace(s, hamt_bit_width=width)

        # json_indent
        if "json_indent" in cfg:
            try:
                indent = int(cfg["json_indent"])
            except (TypeError, ValueError):
                logger.warning("ignoring non-integer json_indent %r", cfg["json_indent"])
            else:
                if indent >= 0:
                    s = replace(s, json_indent=indent)

        return s

    @classmethod
    def from_env(cls, base: Settings | None = None, prefix: str = "STATEDIFF_") -> Settings:
        """
        Build Settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - STATEDIFF_NETWORK ("f" | "t")
            - STATEDIFF_HAMT_BIT_WIDTH
            - STATEDIFF_JSON_INDENT
        """
        s = base or cls()

        def get(name: str) -> str | None:
            return os.getenv(prefix + name)

        mapping: dict[str, Any] = {}
        v = get("NETWORK")
        if v:
            mapping["network"] = v
        v = get("HAMT_BIT_WIDTH")
        if v:
            mapping["hamt_bit_width"] = v
        v = get("JSON_INDENT")
        if v:
            mapping["json_indent"] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Build Settings from a TOML file.

        Search order when `path` is None:
            1) ./statediff.toml (with either a [statediff] table or top-level keys)
            2) ./pyproject.toml under [tool.statediff]

        Returns defaults if no file is present or none holds settings.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("could not read settings from %s: %s", p, exc)
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "statediff.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                # Expect [tool.statediff]
                tool = data.get("tool", {})
                cfg = tool.get("statediff") if isinstance(tool, dict) else None
            else:
                # statediff.toml - accept either [statediff] table or top-level keys
                if "statediff" in data and isinstance(data["statediff"], dict):
                    cfg = data["statediff"]
                else:
                    cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Load Settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (statediff.toml, pyproject.toml).

        Returns:
            Settings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
