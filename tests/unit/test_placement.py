"""Tests for the drag-and-drop placement engine."""

import pytest

from page_builder.errors import NoCurrentPageError
from page_builder.placement import ROOT, DropTarget, GestureState, PlacementEngine
from page_builder.store import DocumentStore

TEXT = {"type": "text", "content": {"text": "Dropped"}}
SECTION = {"type": "section", "content": {"title": "Box"}}


def root_ids(store: DocumentStore) -> list[str]:
  return [e.id for e in store.get_current_page().elements]  # type: ignore[union-attr]


class TestGestureStates:
  """Tests for state transitions."""

  def test_starts_idle(self, engine: PlacementEngine) -> None:
    assert engine.state is GestureState.IDLE
    assert engine.drop_zone is None

  def test_drag_hover_leave(self, engine: PlacementEngine) -> None:
    assert engine.drag_start(TEXT) is True
    assert engine.state is GestureState.DRAGGING

    assert engine.hover() is True
    assert engine.state is GestureState.HOVERING
    assert engine.drop_zone == ROOT

    engine.leave()
    assert engine.state is GestureState.DRAGGING
    assert engine.target is None
    assert engine.drop_zone is None

  def test_hover_requires_drag(self, engine: PlacementEngine) -> None:
    assert engine.hover() is False
    assert engine.state is GestureState.IDLE

  def test_last_hover_wins(self, engine: PlacementEngine) -> None:
    box = engine.store.add_element(SECTION)
    engine.drag_start(TEXT)
    engine.hover()
    engine.hover(box, 0)

    assert engine.target == DropTarget(parent_id=box, index=0)
    assert engine.drop_zone == box

  def test_root_alias(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.hover(ROOT)
    assert engine.target == DropTarget()

  def test_cancel_does_not_mutate(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.hover()
    engine.cancel()

    assert engine.state is GestureState.IDLE
    assert engine.payload is None
    assert root_ids(engine.store) == []

  def test_drag_can_restart_after_commit(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.hover()
    engine.drop()
    assert engine.state is GestureState.COMMITTED

    assert engine.drag_start(SECTION) is True
    assert engine.state is GestureState.DRAGGING

  def test_restart_replaces_payload(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.drag_start(SECTION)
    engine.hover()
    element_id = engine.drop()

    assert engine.store.find_element(element_id).type == "section"  # type: ignore[arg-type, union-attr]


class TestDrop:
  """Tests for committing a drop."""

  def test_drop_at_root(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.hover()
    element_id = engine.drop()

    assert element_id is not None
    assert root_ids(engine.store) == [element_id]
    assert engine.last_inserted_id == element_id
    assert engine.state is GestureState.COMMITTED

  def test_drop_into_container_at_index(self, engine: PlacementEngine) -> None:
    box = engine.store.add_element(SECTION)
    first = engine.store.add_element(TEXT, box)

    engine.drag_start(TEXT)
    engine.hover(box, 0)
    element_id = engine.drop()

    children = engine.store.find_element(box).children  # type: ignore[union-attr]
    assert [c.id for c in children] == [element_id, first]  # type: ignore[union-attr]

  def test_drop_on_leaf_falls_back_to_root(self, engine: PlacementEngine) -> None:
    """The dragged element is appended to the root instead of being lost."""
    leaf = engine.store.add_element(TEXT)
    engine.drag_start(SECTION)
    engine.hover(leaf)

    element_id = engine.drop()

    assert element_id is not None
    assert root_ids(engine.store) == [leaf, element_id]
    assert engine.store.find_element(leaf).children is None  # type: ignore[union-attr]

  def test_drop_on_stale_target_falls_back_to_root(self, engine: PlacementEngine) -> None:
    box = engine.store.add_element(SECTION)
    engine.drag_start(TEXT)
    engine.hover(box)
    engine.store.delete_element(box)

    element_id = engine.drop()

    assert root_ids(engine.store) == [element_id]

  def test_drop_without_target_cancels(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    assert engine.drop() is None
    assert engine.state is GestureState.IDLE
    assert root_ids(engine.store) == []

  def test_drop_after_page_deleted_resets(self, engine: PlacementEngine) -> None:
    """The error propagates and the gesture does not linger."""
    engine.drag_start(TEXT)
    engine.hover()
    engine.store.delete_page(engine.store.get_current_page().id)  # type: ignore[union-attr]

    with pytest.raises(NoCurrentPageError):
      engine.drop()

    assert engine.state is GestureState.IDLE
    assert engine.payload is None
    assert engine.target is None

  def test_drop_when_idle(self, engine: PlacementEngine) -> None:
    assert engine.drop() is None
    assert engine.state is GestureState.IDLE

  def test_payload_reused_safely(self, engine: PlacementEngine) -> None:
    """Every drop inserts a separate copy of the payload literal."""
    payload = {"type": "text", "content": {"text": "x"}}
    ids = []
    for _ in range(2):
      engine.drag_start(payload)
      engine.hover()
      ids.append(engine.drop())

    assert ids[0] != ids[1]
    engine.store.update_element(ids[0], {"content": {"text": "changed"}})
    assert engine.store.find_element(ids[1]).content == {"text": "x"}  # type: ignore[arg-type, union-attr]
    assert payload == {"type": "text", "content": {"text": "x"}}


class TestClickInsert:
  """Tests for palette click insertion."""

  def test_always_appends_to_root(self, engine: PlacementEngine) -> None:
    box = engine.store.add_element(SECTION)
    engine.store.select_element(box)

    element_id = engine.click_insert(TEXT)

    assert root_ids(engine.store) == [box, element_id]
    assert not engine.store.find_element(box).children  # type: ignore[union-attr]

  def test_ignores_gesture_in_progress(self, engine: PlacementEngine) -> None:
    box = engine.store.add_element(SECTION)
    engine.drag_start(SECTION)
    engine.hover(box)

    element_id = engine.click_insert(TEXT)

    assert root_ids(engine.store) == [box, element_id]
    assert engine.state is GestureState.HOVERING


class TestPreviewGate:
  """Canvas gestures are inert while previewing."""

  def test_drag_blocked(self, engine: PlacementEngine) -> None:
    engine.store.toggle_preview_mode()
    assert engine.drag_start(TEXT) is False
    assert engine.state is GestureState.IDLE

  def test_click_insert_blocked(self, engine: PlacementEngine) -> None:
    engine.store.toggle_preview_mode()
    assert engine.click_insert(TEXT) is None
    assert root_ids(engine.store) == []

  def test_drop_after_entering_preview_cancels(self, engine: PlacementEngine) -> None:
    engine.drag_start(TEXT)
    engine.hover()
    engine.store.toggle_preview_mode()

    assert engine.hover() is False
    assert engine.drop() is None
    assert engine.state is GestureState.IDLE
    assert root_ids(engine.store) == []
