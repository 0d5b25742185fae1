#!/usr/bin/env python3
"""
Show JSON loading utilities.

A show file tunes a display without touching code. Every field is optional;
missing or malformed values fall back to the defaults in ShowSettings.

Schema (shows/*.json):
{
  "name": "Human-friendly show name",
  "description": "Optional description",
  "star_count": 100,              # stars per shell
  "shell_thrust": 100.0,          # newtons
  "fanfare_rate": 16.0,           # shells per second
  "fanfare_duration": 4.0,        # seconds
  "min_spawn_period": 2.0,        # idle auto-spawn period range, seconds
  "max_spawn_period": 5.0,
  "framerate_tolerance": 15.0,    # f/s
  "idle_launches": true,
  "fade_alpha": 0.2
}

Users can add their own JSON files into the shows folder and they'll be picked up by the loader.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from .settings import ShowSettings

logger = logging.getLogger(__name__)

SHOWS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "shows")

_NUMERIC_FIELDS = {
  "star_count": int,
  "shell_thrust": float,
  "fanfare_rate": float,
  "fanfare_duration": float,
  "min_spawn_period": float,
  "max_spawn_period": float,
  "framerate_tolerance": float,
  "fade_alpha": float,
}


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Could not read show file %s: %s", path, exc)
    return None
  if not isinstance(data, dict):
    logger.warning("Show file %s does not hold a JSON object", path)
    return None
  return data


def _coerce_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
  overrides: Dict[str, Any] = {}
  for key, cast in _NUMERIC_FIELDS.items():
    if key not in data:
      continue
    try:
      overrides[key] = cast(data[key])
    except (TypeError, ValueError, OverflowError):
      logger.warning("Ignoring malformed show value %s=%r", key, data[key])
  if isinstance(data.get("idle_launches"), bool):
    overrides["idle_launches"] = data["idle_launches"]
  return overrides


def settings_from_dict(data: Dict[str, Any], default_name: str = "Default") -> ShowSettings:
  """
  Build validated ShowSettings from a decoded show file.
  Falls back to defaults if the combined values are inconsistent.
  """
  overrides = _coerce_overrides(data)
  overrides["name"] = str(data.get("name") or default_name)
  settings = ShowSettings().with_overrides(overrides)
  try:
    return settings.validate()
  except ValueError as exc:
    logger.warning("Show '%s' is invalid (%s); using defaults", overrides["name"], exc)
    return ShowSettings(name=overrides["name"])


def list_shows(directory: str = SHOWS_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available shows."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(directory):
    return items
  for fn in sorted(os.listdir(directory)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(directory, fn)) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_show(file_name: str, directory: str = SHOWS_DIR) -> ShowSettings:
  """Load a show JSON by file name; unreadable files give the default show."""
  path = os.path.join(directory, file_name)
  default_name = os.path.splitext(file_name)[0]
  data = _read_json(path)
  if data is None:
    return ShowSettings(name=default_name)
  settings = settings_from_dict(data, default_name)
  logger.info("Loaded show '%s' from %s", settings.name, file_name)
  return settings
