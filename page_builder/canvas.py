"""Logical canvas model: device widths and overlay descriptors.

Renderers paint overlays in list order, which is the document's pre-order
traversal, so a child's outline is always drawn above its parent's.
"""

from dataclasses import asdict, dataclass
from typing import Any

from .elements import walk
from .store import DocumentStore

DEVICE_WIDTHS: dict[str, str] = {
  "desktop": "100%",
  "tablet": "768px",
  "mobile": "375px",
}

DEVICE_LABELS: dict[str, str] = {
  "tablet": "Tablet View (768px)",
  "mobile": "Mobile View (375px)",
}


@dataclass(frozen=True)
class CanvasItem:
  """What a renderer needs to decorate one element on the canvas."""

  element_id: str
  type: str
  depth: int
  parent_id: str | None
  is_selected: bool
  show_controls: bool
  show_hover_label: bool
  is_drop_zone: bool
  accepts_drop: bool
  hidden: bool

  def to_dict(self) -> dict[str, Any]:
    return asdict(self)


def canvas_width(mode: str) -> str:
  """CSS width of the canvas for a preview device."""
  try:
    return DEVICE_WIDTHS[mode]
  except KeyError:
    raise ValueError(f"Unknown preview mode: {mode}") from None


def device_label(mode: str) -> str | None:
  """Caption above the device frame; desktop has none."""
  canvas_width(mode)
  return DEVICE_LABELS.get(mode)


def show_empty_state(store: DocumentStore) -> bool:
  """Whether the "start building" placeholder should be shown."""
  page = store.get_current_page()
  if store.selection.is_preview_mode:
    return False
  return page is None or not page.elements


def build_overlays(store: DocumentStore, drop_zone: str | None = None) -> list[CanvasItem]:
  """Describe every element of the current page in paint order."""
  page = store.get_current_page()
  if page is None:
    return []

  preview = store.selection.is_preview_mode
  selected = store.get_selected_element()
  hovered = store.get_hovered_element()
  selected_id = selected.id if selected else None
  hovered_id = hovered.id if hovered else None

  items: list[CanvasItem] = []
  for node, parent, depth in walk(page.elements):
    is_selected = node.id == selected_id
    items.append(
      CanvasItem(
        element_id=node.id,
        type=node.type,
        depth=depth,
        parent_id=parent.id if parent else None,
        is_selected=is_selected and not preview,
        show_controls=is_selected and not preview,
        show_hover_label=node.id == hovered_id and not is_selected and not preview,
        is_drop_zone=drop_zone == node.id,
        accepts_drop=store.is_container(node) and not preview,
        hidden=bool(node.props.get("hidden", False)),
      )
    )
  return items


def canvas_click(store: DocumentStore, element_id: str | None) -> bool:
  """Select the clicked element (None for the background).

  Returns False when preview mode swallowed the click.
  """
  if store.selection.is_preview_mode:
    return False
  store.select_element(element_id)
  return True


def canvas_state(store: DocumentStore, drop_zone: str | None = None) -> dict[str, Any]:
  """Everything the canvas needs for one paint."""
  mode = store.get_preview_mode()
  page = store.get_current_page()
  return {
    "pageId": page.id if page else None,
    "width": canvas_width(mode),
    "deviceLabel": device_label(mode),
    "isPreviewMode": store.selection.is_preview_mode,
    "showEmptyState": show_empty_state(store),
    "dropZone": drop_zone,
    "overlays": [item.to_dict() for item in build_overlays(store, drop_zone)],
  }
