"""Configuration loader for the page builder workspace."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .ids import make_id_generator
from .selection import PANELS, PREVIEW_MODES

CONFIG_ENV_VAR = "PAGE_BUILDER_CONFIG"
DEFAULT_CONFIG_PATH = Path("page_builder.yaml")


@dataclass
class BuilderSettings:
  """Settings for a document store and its HTTP surface."""

  data_dir: str | None = None  # None uses the packaged catalog
  id_strategy: str = "uuid"  # "uuid" or "sequential"
  container_types: list[str] = field(default_factory=lambda: ["section"])
  default_preview_mode: str = "desktop"
  default_active_panel: str | None = "components"
  log_level: str = "INFO"

  def __post_init__(self) -> None:
    # Fails fast on a bad strategy name
    make_id_generator(self.id_strategy)
    if self.default_preview_mode not in PREVIEW_MODES:
      raise ValueError(f"Unknown preview mode: {self.default_preview_mode}")
    if self.default_active_panel is not None and self.default_active_panel not in PANELS:
      raise ValueError(f"Unknown panel: {self.default_active_panel}")

  @classmethod
  def from_yaml(cls, path: Path | str = DEFAULT_CONFIG_PATH) -> "BuilderSettings":
    """Load settings from a YAML file."""
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    builder = data.get("builder") or {}
    canvas = data.get("canvas") or {}
    logging_data = data.get("logging") or {}

    return cls(
      data_dir=builder.get("data_dir"),
      id_strategy=builder.get("id_strategy", "uuid"),
      container_types=list(builder.get("container_types", ["section"])),
      default_preview_mode=canvas.get("preview_mode", "desktop"),
      default_active_panel=canvas.get("active_panel", "components"),
      log_level=str(logging_data.get("level", "INFO")),
    )


def load_settings(path: Path | str | None = None) -> BuilderSettings:
  """Resolve settings from an explicit path, the environment, or defaults."""
  candidate = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
  candidate = Path(candidate)
  if candidate.exists():
    return BuilderSettings.from_yaml(candidate)
  if path is not None:
    raise FileNotFoundError(f"Config file {candidate} not found")
  return BuilderSettings()
