#!/usr/bin/env python3
"""
Scenario JSON loading utilities.

A scenario describes the own-ship, the contacts and the run settings.
Bundled scenarios live in sonarcore/scenarios/*.json; any other path can be
loaded with load_scenario_file().

Schema
======
{
  "name": "Human-friendly scenario name",
  "description": "Optional description",
  "time_step": 1.0,                  # optional, seconds per tick
  "history_window": 60.0,            # optional, seconds of bearing history
  "track_length": 200,               # optional, trail points per body
  "own_ship": {
    "name": "Own ship",
    "position": [5000.0, 5000.0],    # meters, x east / y north
    "heading": 45.0,                 # degrees
    "speed": 5.0,                    # knots
    "color": [0, 200, 255]
  },
  "targets": [
    {"name": "Sierra 1", "position": [10000.0, 2000.0], "heading": 225.0, "speed": 10.0}
  ]
}

Invalid target entries are skipped with a warning. A missing or unreadable
file, or a bad own-ship entry, raises ScenarioError.
"""
import json
import logging
import os
from typing import List, NamedTuple, Optional, Tuple

from .constants import DEFAULT_HISTORY_WINDOW, DEFAULT_TIME_STEP, DEFAULT_TRACK_LENGTH, OWN_SHIP_COLOR, TARGET_COLOR
from .data_models import KinematicBody
from .errors import ScenarioError
from .world import SimulationWorld, WorldSettings

logger = logging.getLogger(__name__)

SCENARIOS_DIR = os.path.join(os.path.dirname(__file__), "scenarios")


class Scenario(NamedTuple):
  name: str
  own_ship: KinematicBody
  targets: List[KinematicBody]
  settings: WorldSettings


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, ValueError) as e:
    logger.warning("could not read %s: %s", path, e)
    return None


def _coerce_color(c, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
  except (TypeError, ValueError, IndexError):
    return default
  r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
  return (r, g, b)


def _body_from_dict(d: dict, default_name: str, default_color: Tuple[int, int, int]) -> KinematicBody:
  if not isinstance(d, dict):
    raise TypeError(f"expected an object, got {type(d).__name__}")
  return KinematicBody(
    name=str(d.get("name", default_name)),
    position=(float(d["position"][0]), float(d["position"][1])),
    heading=float(d.get("heading", 0.0)),
    speed=float(d.get("speed", 0.0)),
    color=_coerce_color(d.get("color"), default_color),
  )


def list_scenarios() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for bundled scenarios."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(SCENARIOS_DIR):
    return items
  for fn in sorted(os.listdir(SCENARIOS_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(SCENARIOS_DIR, fn))
    if not isinstance(data, dict):
      data = {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_scenario(file_name: str) -> Scenario:
  """Load a bundled scenario by file name."""
  return load_scenario_file(os.path.join(SCENARIOS_DIR, file_name))


def load_scenario_file(path: str) -> Scenario:
  data = _read_json(path)
  if not isinstance(data, dict):
    raise ScenarioError(f"could not load scenario from {path}")
  display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]

  try:
    settings = WorldSettings(
      time_step=data.get("time_step", DEFAULT_TIME_STEP),
      history_window=data.get("history_window", DEFAULT_HISTORY_WINDOW),
      track_length=data.get("track_length", DEFAULT_TRACK_LENGTH),
    )
    own_ship = _body_from_dict(data["own_ship"], "Own ship", OWN_SHIP_COLOR)
  except (KeyError, TypeError, ValueError, IndexError) as e:
    raise ScenarioError(f"{path}: invalid scenario: {e}") from e

  targets: List[KinematicBody] = []
  targets_data = data.get("targets", [])
  if not isinstance(targets_data, list):
    raise ScenarioError(f"{path}: \"targets\" must be a list")
  for i, t in enumerate(targets_data, start=1):
    try:
      targets.append(_body_from_dict(t, f"Sierra {i}", TARGET_COLOR))
    except (KeyError, TypeError, ValueError, IndexError) as e:
      logger.warning("%s: skipping target %d: %s", path, i, e)
      continue
  return Scenario(display_name, own_ship, targets, settings)


def build_world(scenario: Scenario) -> SimulationWorld:
  """Create a world from a scenario, registering every target."""
  world = SimulationWorld(scenario.own_ship, scenario.settings)
  for body in scenario.targets:
    world.add_target(body)
  logger.info("scenario '%s': %d contact(s), %s", scenario.name, len(world.targets), scenario.settings)
  return world
