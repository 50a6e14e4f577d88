from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml

from .extract import DEFAULT_CFP_KEYWORDS

DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

class SettingsError(ValueError):
    pass

@dataclass(frozen=True)
class ValidatorSettings:
    screenshot_dir: str = "out/screenshots"
    output: str = "out/conferences_validated.xlsx"
    target_year: int = 2026
    delay_s: float = 2.0
    settle_ms: int = 2000
    timeout_ms: int = 30000
    launch_timeout_ms: int = 60000
    headless: bool = True
    user_agent: str = DEFAULT_UA
    cfp_keywords: Tuple[str, ...] = DEFAULT_CFP_KEYWORDS
    max_links: int = 100

    def override(self, **changes: Any) -> "ValidatorSettings":
        """Replace only the values that were actually given."""
        given = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **given)

_SCALAR_TYPES = {
    "screenshot_dir": str,
    "output": str,
    "user_agent": str,
    "target_year": int,
    "settle_ms": int,
    "timeout_ms": int,
    "launch_timeout_ms": int,
    "max_links": int,
    "delay_s": float,
    "headless": bool,
}

def _check_type(key: str, value: Any, kind: type) -> Any:
    # YAML booleans never count as numbers
    if kind is not bool and isinstance(value, bool):
        raise SettingsError(f"{key} must be {kind.__name__}, got bool")
    if kind is float and isinstance(value, int):
        value = float(value)
    if not isinstance(value, kind):
        raise SettingsError(f"{key} must be {kind.__name__}, got {type(value).__name__}")
    if kind in (int, float) and value < 0:
        raise SettingsError(f"{key} must not be negative")
    return value

def load_settings(path: Optional[str]) -> ValidatorSettings:
    if not path:
        return ValidatorSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except OSError as e:
        raise SettingsError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(cfg, dict):
        raise SettingsError(f"Config {path} must be a mapping, got {type(cfg).__name__}")

    known = {f.name for f in dataclasses.fields(ValidatorSettings)}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise SettingsError(f"Unknown config keys in {path}: {unknown}")

    values: Dict[str, Any] = dict(cfg)
    for key, kind in _SCALAR_TYPES.items():
        if key in values:
            values[key] = _check_type(key, values[key], kind)
    if "cfp_keywords" in values:
        kws = values["cfp_keywords"]
        if not isinstance(kws, list) or not all(isinstance(k, str) for k in kws):
            raise SettingsError("cfp_keywords must be a list of strings")
        values["cfp_keywords"] = tuple(kws)

    return ValidatorSettings(**values)
