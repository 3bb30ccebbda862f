"""Configuration management for logtee.

Three-layer config resolution (highest priority wins):
  1. CLI flags — explicit on the command line
  2. Project config — .logtee.json in the working directory or a parent
  3. Global config — ~/.logtee/config.json

Recognized keys::

    {
      "sinks":  ["-:1", "app.log", {"path": null, "level": "debug"}],
      "levels": [{"level": 5, "prefix": "(NN): "}, "-2:(TT): "],
      "prefix": "epoch",
      "line_max": 4096,
      "terminator": ""
    }

A sink without a path is stderr, "-" is stdout.
"""

import json
import os
from pathlib import Path

from logtee.errors import InvalidConfiguration
from logtee.levels import parse_level
from logtee.manager import LINE_MAX, init_tee
from logtee.prefixes import PREFIX_PROVIDERS
from logtee.sinks import SinkSpec, parse_sink_spec


CONFIG_KEYS = ["sinks", "levels", "prefix", "line_max", "terminator"]
PROJECT_CONFIG_NAME = ".logtee.json"


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.logtee/)."""
    return Path.home() / ".logtee"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .logtee.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, IsADirectoryError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_global_config():
    """Load the global config file."""
    return load_json(get_global_config_path())


def load_project_config(start_dir=None):
    """Load the nearest .logtee.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def resolve_config(args, keys=None):
    """Resolve config values using three-layer precedence.

    For each key in `keys`, checks (in order):
      1. CLI args (from argparse namespace)
      2. Project .logtee.json (or the file named by --config)
      3. Global ~/.logtee/config.json

    Returns a dict with resolved values (None when unset everywhere).
    """
    if keys is None:
        keys = CONFIG_KEYS

    explicit = getattr(args, "config", None)
    if explicit:
        project_cfg = load_json(explicit)
    else:
        project_cfg, _ = load_project_config()
    global_cfg = load_global_config()

    resolved = {}
    for key in keys:
        arg_key = key.replace("-", "_")
        json_key = key.replace("_", "-")

        # Layer 1: CLI (empty lists from append actions count as unset)
        cli_val = getattr(args, arg_key, None)
        if cli_val is not None and cli_val != []:
            resolved[arg_key] = cli_val
            continue

        # Layers 2 and 3: project, then global
        for layer in (project_cfg, global_cfg):
            val = layer.get(arg_key, layer.get(json_key))
            if val is not None:
                resolved[arg_key] = val
                break
        else:
            resolved[arg_key] = None

    return resolved


# ---------------------------------------------------------------------------
# Config writing
# ---------------------------------------------------------------------------
def save_project_config(data, target_dir=None):
    """Write .logtee.json to target_dir (default: cwd)."""
    target = Path(target_dir or os.getcwd()) / PROJECT_CONFIG_NAME
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return target


# ---------------------------------------------------------------------------
# Applying a resolved config to a TeeLogger
# ---------------------------------------------------------------------------
def _coerce_sink(value) -> SinkSpec:
    try:
        if isinstance(value, str):
            return parse_sink_spec(value)
        if isinstance(value, dict):
            return SinkSpec(path=value.get("path") or None,
                            level=parse_level(value.get("level", 0)))
    except ValueError as exc:
        raise InvalidConfiguration(f"bad sink entry {value!r}: {exc}") from exc
    raise InvalidConfiguration(f"bad sink entry {value!r}")


def _coerce_level(value):
    """Accept {"level": N, "prefix": P} or "LEVEL:PREFIX"."""
    try:
        if isinstance(value, str):
            level, sep, prefix = value.partition(":")
            if not sep:
                raise ValueError("expected LEVEL:PREFIX")
            return parse_level(level), prefix
        if isinstance(value, dict):
            return parse_level(value["level"]), value.get("prefix")
    except (KeyError, ValueError) as exc:
        raise InvalidConfiguration(f"bad level entry {value!r}: {exc}") from exc
    raise InvalidConfiguration(f"bad level entry {value!r}")


def apply_config(tee, cfg):
    """Register the sinks, levels and prefix provider described by cfg.

    Sinks go first so that problems with the level entries, such as an
    empty prefix, are reported as Warning lines on those sinks.

    Raises:
        InvalidConfiguration: malformed entries or unknown prefix name
    """
    for entry in cfg.get("sinks") or []:
        spec = _coerce_sink(entry)
        tee.add_sink_path(spec.path, spec.level)

    for entry in cfg.get("levels") or []:
        level, prefix = _coerce_level(entry)
        tee.add_level(level, prefix)

    name = cfg.get("prefix")
    if name:
        try:
            tee.set_prefix_callback(PREFIX_PROVIDERS[name])
        except KeyError:
            known = ", ".join(sorted(PREFIX_PROVIDERS))
            raise InvalidConfiguration(
                f"unknown prefix provider '{name}' (known: {known})") from None
    return tee


def configure_tee(cfg):
    """Install a fresh singleton TeeLogger built from a resolved config."""
    line_max = cfg.get("line_max")
    try:
        line_max = LINE_MAX if line_max is None else int(line_max)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"bad line_max {line_max!r}") from exc
    terminator = cfg.get("terminator") or ""
    tee = init_tee(line_max=line_max, terminator=terminator)
    return apply_config(tee, cfg)
