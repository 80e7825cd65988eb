"""Selection, hover, side panel and preview state for the canvas."""

from dataclasses import dataclass
from typing import Literal, get_args

PreviewMode = Literal["desktop", "tablet", "mobile"]
Panel = Literal["components", "pages", "theme", "settings", "versions", "code"]

PREVIEW_MODES: tuple[str, ...] = get_args(PreviewMode)
PANELS: tuple[str, ...] = get_args(Panel)


@dataclass
class SelectionState:
  """Canvas UI state shared by the toolbar, sidebar and properties panel.

  Element references are ids only. Resolving them against the live tree is
  the document store's job, so a deleted element simply stops resolving.
  """

  selected_element_id: str | None = None
  hovered_element_id: str | None = None
  preview_mode: PreviewMode = "desktop"
  is_preview_mode: bool = False
  active_panel: Panel | None = "components"

  def select(self, element_id: str | None) -> None:
    self.selected_element_id = element_id

  def hover(self, element_id: str | None) -> None:
    self.hovered_element_id = element_id

  def clear(self) -> None:
    """Drop both element references."""
    self.selected_element_id = None
    self.hovered_element_id = None

  def set_preview_mode(self, mode: str) -> None:
    """Set the device width hint."""
    if mode not in PREVIEW_MODES:
      raise ValueError(f"Unknown preview mode: {mode}")
    self.preview_mode = mode  # type: ignore[assignment]

  def toggle_preview(self) -> bool:
    """Flip the read-only preview gate. Entering preview clears references."""
    self.is_preview_mode = not self.is_preview_mode
    if self.is_preview_mode:
      self.clear()
    return self.is_preview_mode

  def set_active_panel(self, panel: str | None) -> None:
    if panel is not None and panel not in PANELS:
      raise ValueError(f"Unknown panel: {panel}")
    self.active_panel = panel  # type: ignore[assignment]

  def to_dict(self) -> dict[str, object]:
    return {
      "selectedElementId": self.selected_element_id,
      "hoveredElementId": self.hovered_element_id,
      "previewMode": self.preview_mode,
      "isPreviewMode": self.is_preview_mode,
      "activePanel": self.active_panel,
    }
