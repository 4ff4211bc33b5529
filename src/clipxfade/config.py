"""Transition config loader -- the same settings as the CLI, from a file.

JSON files (.json) are read with the json module, anything else as YAML.
Settings live at the top level or under a `transition` key (the older
`ff_transition` key is accepted too).

Config schema:
  transition:
    input:                      # string or list
      - "${clips}/intro.mp4"
      - "${clips}/day1"         # directories expand to .mp4/.mov files
    output: "out/joined.mp4"
    grep: "take"
    sort: "--reverse"
    effects: "fade,wipeleft"    # CSV string or list
    duration: "1.5"             # number or numeric string
    loglevel: "error"
  paths:
    clips: "/data/clips"
"""

import json
import math
from pathlib import Path

import yaml

from .common import resolve_path_vars
from .errors import ConfigError


VALID_LOGLEVELS = (
    "quiet", "panic", "fatal", "error", "warning",
    "info", "verbose", "debug", "trace",
)

DEFAULTS = {
    "output": "ff_transition.mp4",
    "grep": None,
    "sort": None,
    "effects": ("fade",),
    "duration": 1.0,
    "loglevel": "error",
}

_SECTION_KEYS = ("transition", "ff_transition")
_FIELDS = {"input", "output", "grep", "sort", "effects", "duration", "loglevel", "description"}


def parse_effects(value) -> tuple[str, ...]:
    """Split a CSV effect string (or list) into effect names.

    Names are not checked against ffmpeg's catalog; unknown effects only
    fail when ffmpeg runs.
    """
    if isinstance(value, str):
        names = value.split(",")
    elif isinstance(value, (list, tuple)):
        names = value
    else:
        raise ConfigError(f"effects must be a CSV string or list, got {value!r}")

    effects = tuple(str(n).strip() for n in names if str(n).strip())
    if not effects:
        raise ConfigError(f"effects must name at least one effect, got {value!r}")
    return effects


def parse_transition_duration(value) -> float:
    """Accept a number or numeric string, e.g. 1, 0.5, "1.5"."""
    if isinstance(value, bool):
        raise ConfigError(f"duration must be numeric, got {value!r}")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"duration must be numeric, got {value!r}") from None
    if not math.isfinite(seconds):
        raise ConfigError(f"duration must be finite, got {value!r}")
    return seconds


def parse_loglevel(value) -> str:
    if value not in VALID_LOGLEVELS:
        raise ConfigError(
            f"invalid loglevel '{value}'. Valid: {list(VALID_LOGLEVELS)}"
        )
    return value


def _read(config_path: Path):
    try:
        with open(config_path) as f:
            if config_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from None
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Malformed config file {config_path}: {e}") from None


def load_transition_config(config_path: str | Path) -> dict:
    """Load and normalize a transition config file.

    Processing pipeline:
      1. Parse JSON / YAML.
      2. Pick the settings mapping (top level or `transition` section).
      3. Resolve ${path} variables in inputs and output.
      4. Resolve relative inputs against the config file's directory.
      5. Validate and convert effects, duration, loglevel.

    Returns:
        Dict holding only the keys present in the file (input is always a
        list). Defaults are not applied here; see DEFAULTS.

    Raises:
        ConfigError: Unreadable file or invalid fields.
    """
    config_path = Path(config_path)
    raw = _read(config_path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {config_path}: expected a mapping at top level")

    paths = raw.get("paths", {})
    if not isinstance(paths, dict):
        raise ConfigError(f"Config {config_path}: 'paths' must be a mapping")

    settings = None
    for key in _SECTION_KEYS:
        if key in raw:
            settings = raw[key]
            break
    if settings is None:
        settings = {k: v for k, v in raw.items() if k != "paths"}
    if not isinstance(settings, dict):
        raise ConfigError(f"Config {config_path}: transition settings must be a mapping")

    unknown = set(settings) - _FIELDS
    if unknown:
        raise ConfigError(f"Config {config_path}: unknown field(s) {sorted(unknown)}")

    def _resolve(text):
        try:
            return resolve_path_vars(str(text), paths)
        except ValueError as e:
            raise ConfigError(f"Config {config_path}: {e}") from None

    config = {}

    if "input" in settings:
        inputs = settings["input"]
        if isinstance(inputs, str):
            inputs = [inputs]
        if not isinstance(inputs, list):
            raise ConfigError(f"Config {config_path}: input must be a string or list")
        base = config_path.resolve().parent
        resolved = []
        for item in inputs:
            p = Path(_resolve(item)).expanduser()
            resolved.append(str(p if p.is_absolute() else base / p))
        config["input"] = resolved

    if settings.get("output"):
        config["output"] = _resolve(settings["output"])
    if settings.get("grep"):
        config["grep"] = str(settings["grep"])
    if settings.get("sort"):
        config["sort"] = str(settings["sort"])
    if "effects" in settings:
        config["effects"] = parse_effects(settings["effects"])
    if "duration" in settings:
        config["duration"] = parse_transition_duration(settings["duration"])
    if "loglevel" in settings:
        config["loglevel"] = parse_loglevel(settings["loglevel"])

    return config
