"""Configuration loading for markdown-enclave."""

import sys
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TypeVar

from .entity import normalize_theme

T = TypeVar("T")

CONFIG_SECTION = "enclave"


def _find_similar(key: str, valid_keys: set[str], threshold: float = 0.6) -> str | None:
    """Find a similar key from valid_keys using Levenshtein ratio.

    Args:
        key: The unknown key to match
        valid_keys: Set of valid key names
        threshold: Minimum similarity ratio (0-1) to suggest

    Returns:
        Most similar key if above threshold, None otherwise
    """

    def levenshtein_ratio(s1: str, s2: str) -> float:
        m, n = len(s1), len(s2)
        if m == 0 or n == 0:
            return 0.0

        d = [[0] * (n + 1) for _ in range(m + 1)]
        for i in range(m + 1):
            d[i][0] = i
        for j in range(n + 1):
            d[0][j] = j

        for i in range(1, m + 1):
            for j in range(1, n + 1):
                cost = 0 if s1[i - 1] == s2[j - 1] else 1
                d[i][j] = min(d[i - 1][j] + 1, d[i][j - 1] + 1, d[i - 1][j - 1] + cost)

        return 1.0 - (d[m][n] / max(m, n))

    best_match = None
    best_ratio = 0.0

    for valid in sorted(valid_keys):
        ratio = levenshtein_ratio(key.lower(), valid.lower())
        if ratio > best_ratio:
            best_ratio = ratio
            best_match = valid

    return best_match if best_ratio >= threshold else None


def _warn_unknown_keys(
    data: dict, valid_keys: set[str], section: str, config_path: Path | None = None
) -> None:
    """Warn on stderr about unknown keys in a config section."""
    unknown_keys = set(data.keys()) - valid_keys
    for key in sorted(unknown_keys):
        location = f" in {config_path}" if config_path else ""
        msg = f"Warning: Unknown config key '{key}' in [{section}]{location}"

        similar = _find_similar(key, valid_keys)
        if similar:
            msg += f". Did you mean '{similar}'?"

        print(msg, file=sys.stderr)


def _expand_path(value: str | None) -> str:
    if not value:
        return ""
    return str(Path(value).expanduser())


def _load_dataclass(
    cls: type[T],
    data: dict,
    defaults: T,
    transforms: dict[str, callable] | None = None,
    section: str = "",
    config_path: Path | None = None,
) -> T:
    """Load a dataclass from a dict with defaults and optional field transforms.

    Args:
        cls: The dataclass type to create
        data: Dict of values from config file
        defaults: Instance with default values
        transforms: Optional dict mapping field names to transform functions
        section: Section name for validation warnings
        config_path: Path to config file for validation warnings

    Returns:
        New instance of cls with values from data, falling back to defaults
    """
    transforms = transforms or {}
    kwargs = {}
    valid_keys = {f.name for f in fields(cls)}

    _warn_unknown_keys(data, valid_keys, section, config_path)

    for f in fields(cls):
        value = data.get(f.name, getattr(defaults, f.name))
        if f.name in transforms:
            value = transforms[f.name](value)
        kwargs[f.name] = value
    return cls(**kwargs)


@dataclass
class EnclaveConfig:
    """Rendering options shared by every embed in a document."""

    iframe_disabled: bool = False
    default_theme: str = "light"
    templates_dir: str = ""

    @classmethod
    def load(cls, config_path: Path) -> "EnclaveConfig":
        """Load configuration from the [enclave] table of a TOML file.

        Args:
            config_path: Path to the TOML file

        Returns:
            Loaded EnclaveConfig with defaults merged. Defaults only if the
            file does not exist.
        """
        config = cls()

        if not config_path.exists():
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        _warn_unknown_keys(data, {CONFIG_SECTION}, "top-level", config_path)

        if CONFIG_SECTION in data:
            config = _load_dataclass(
                cls,
                data[CONFIG_SECTION],
                config,
                transforms={
                    "iframe_disabled": bool,
                    "default_theme": normalize_theme,
                    "templates_dir": _expand_path,
                },
                section=CONFIG_SECTION,
                config_path=config_path,
            )

        return config

    def get_templates_dir(self) -> Path | None:
        """Get the template override directory if it exists."""
        if self.templates_dir:
            templates_dir = Path(self.templates_dir)
            if templates_dir.exists():
                return templates_dir
        return None

    def to_extension_config(self) -> dict:
        """Keyword arguments for EnclaveExtension."""
        templates_dir = self.get_templates_dir()
        return {
            "iframe_disabled": self.iframe_disabled,
            "default_theme": self.default_theme,
            "templates_dir": str(templates_dir) if templates_dir else "",
        }
