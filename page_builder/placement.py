"""Drag-and-drop and click-to-insert placement on the canvas.

A drag gesture is an explicit state machine::

  IDLE --drag_start--> DRAGGING --hover--> HOVERING --drop--> COMMITTED
                          ^   |                |
                          |   +----cancel------+----> IDLE
                          +------leave---------+

Dropping on a target that cannot take children never loses the element: it
is appended to the page root instead. Clicking a palette entry skips the
gesture entirely and always appends to the root.
"""

import copy
from dataclasses import dataclass
from enum import Enum

from .builder_config import ElementNode, dict_to_element
from .errors import InvalidTargetError, NotFoundError
from .logger import get_logger
from .store import DocumentStore, ElementInput

logger = get_logger(__name__)

ROOT = "root"


class GestureState(Enum):
  IDLE = "idle"
  DRAGGING = "dragging"
  HOVERING = "hovering"
  COMMITTED = "committed"


@dataclass(frozen=True)
class DropTarget:
  """Where a drop would land: a container id (None for root) and index."""

  parent_id: str | None = None
  index: int | None = None

  @property
  def zone(self) -> str:
    return self.parent_id or ROOT


class PlacementEngine:
  """Resolve canvas gestures into document store mutations.

  Every method here is canvas-originated, so all of them are no-ops while
  the store is in preview mode.
  """

  def __init__(self, store: DocumentStore) -> None:
    self.store = store
    self.state = GestureState.IDLE
    self.payload: ElementNode | None = None
    self.target: DropTarget | None = None
    self.last_inserted_id: str | None = None

  @property
  def drop_zone(self) -> str | None:
    """Container id (or "root") currently highlighted as the drop zone."""
    if self.state is GestureState.HOVERING and self.target is not None:
      return self.target.zone
    return None

  def _blocked(self) -> bool:
    return self.store.selection.is_preview_mode

  def drag_start(self, payload: ElementInput) -> bool:
    """Begin dragging an element literal. Returns False when blocked."""
    if self._blocked():
      logger.debug("Drag start ignored in preview mode")
      return False
    self.payload = dict_to_element(payload)  # type: ignore[arg-type]
    self.target = None
    self.state = GestureState.DRAGGING
    return True

  def hover(self, parent_id: str | None = None, index: int | None = None) -> bool:
    """Pointer is over a drop zone; the latest call wins."""
    if self._blocked() or self.state not in (GestureState.DRAGGING, GestureState.HOVERING):
      return False
    if parent_id == ROOT:
      parent_id = None
    self.target = DropTarget(parent_id=parent_id, index=index)
    self.state = GestureState.HOVERING
    return True

  def leave(self) -> None:
    """Pointer left every drop zone but the drag continues."""
    if self.state is GestureState.HOVERING:
      self.target = None
      self.state = GestureState.DRAGGING

  def cancel(self) -> None:
    """Abort the gesture without touching the document."""
    if self.state in (GestureState.DRAGGING, GestureState.HOVERING):
      logger.debug("Drag cancelled")
    self._reset(GestureState.IDLE)

  def drop(self) -> str | None:
    """Commit the gesture. Returns the inserted id, or None if cancelled."""
    if self.state is not GestureState.HOVERING or self.payload is None or self.target is None:
      self.cancel()
      return None
    if self._blocked():
      logger.debug("Drop ignored in preview mode")
      self.cancel()
      return None

    try:
      element_id = self._insert(copy.deepcopy(self.payload), self.target)
    except Exception:
      # No page to drop into (or workspace closed); the gesture is over
      self._reset(GestureState.IDLE)
      raise

    self.last_inserted_id = element_id
    self._reset(GestureState.COMMITTED)
    return element_id

  def click_insert(self, payload: ElementInput) -> str | None:
    """Palette click: always append to the page root."""
    if self._blocked():
      logger.debug("Click insert ignored in preview mode")
      return None
    element_id = self.store.add_element(payload)
    self.last_inserted_id = element_id
    return element_id

  def _insert(self, payload: ElementNode, target: DropTarget) -> str:
    try:
      return self.store.add_element(payload, target.parent_id, target.index)
    except (InvalidTargetError, NotFoundError) as e:
      logger.info("Drop target %s rejected (%s); appending to root", target.zone, e)
      return self.store.add_element(payload)

  def _reset(self, state: GestureState) -> None:
    self.payload = None
    self.target = None
    self.state = state
