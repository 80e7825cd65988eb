"""Element kinds and tree helpers for the page document.

All tree walks are depth-first, pre-order, children in list order. That
order is also the paint order of canvas overlays, so every lookup in this
module goes through ``walk``.
"""

import copy
import dataclasses
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .builder_config import ElementNode
from .ids import IdGenerator


@dataclass(frozen=True)
class TextContent:
  text: str = ""


@dataclass(frozen=True)
class HeaderContent:
  title: str = ""


@dataclass(frozen=True)
class SectionContent:
  title: str = ""
  description: str = ""


@dataclass(frozen=True)
class ImageContent:
  src: str = ""
  alt: str = ""


@dataclass(frozen=True)
class VideoContent:
  src: str = ""
  poster: str = ""


@dataclass(frozen=True)
class ButtonContent:
  text: str = ""
  variant: str = "default"
  size: str = "default"


@dataclass(frozen=True)
class FooterContent:
  company: str = ""


@dataclass(frozen=True)
class FormContent:
  title: str = ""


@dataclass(frozen=True)
class CustomContent:
  html: str = ""


@dataclass(frozen=True)
class ElementKind:
  """Per-type rules: content shape and whether children are allowed."""

  name: str
  content_type: type
  container: bool = False

  def default_content(self) -> dict[str, Any]:
    """Content mapping for a fresh element of this kind."""
    return dataclasses.asdict(self.content_type())


ELEMENT_KINDS: dict[str, ElementKind] = {
  kind.name: kind
  for kind in (
    ElementKind("text", TextContent),
    ElementKind("header", HeaderContent),
    ElementKind("footer", FooterContent),
    ElementKind("section", SectionContent, container=True),
    ElementKind("image", ImageContent),
    ElementKind("video", VideoContent),
    ElementKind("button", ButtonContent),
    ElementKind("form", FormContent),
    ElementKind("custom", CustomContent),
  )
}

CONTAINER_TYPES: frozenset[str] = frozenset(
  name for name, kind in ELEMENT_KINDS.items() if kind.container
)


def typed_content(node: ElementNode) -> Any:
  """Return the typed content view for known kinds.

  Keys the kind does not declare are ignored. Unknown kinds get a plain
  copy of the content mapping.
  """
  kind = ELEMENT_KINDS.get(node.type)
  if kind is None:
    return dict(node.content)
  names = {f.name for f in dataclasses.fields(kind.content_type)}
  return kind.content_type(**{k: v for k, v in node.content.items() if k in names})


def is_container(
  node: ElementNode, container_types: Iterable[str] = CONTAINER_TYPES
) -> bool:
  """Whether the node may receive children."""
  return node.type in container_types or node.children is not None


def walk(
  elements: list[ElementNode],
  parent: ElementNode | None = None,
  depth: int = 0,
) -> Iterator[tuple[ElementNode, ElementNode | None, int]]:
  """Yield (node, parent, depth) for every node in pre-order."""
  for node in elements:
    yield node, parent, depth
    if node.children:
      yield from walk(node.children, node, depth + 1)


def iter_elements(elements: list[ElementNode]) -> Iterator[ElementNode]:
  """Yield every node in pre-order."""
  for node, _, _ in walk(elements):
    yield node


def find_element(elements: list[ElementNode], element_id: str) -> ElementNode | None:
  """Find a node by id anywhere in the forest."""
  for node in iter_elements(elements):
    if node.id == element_id:
      return node
  return None


def find_location(
  elements: list[ElementNode], element_id: str
) -> tuple[list[ElementNode], int] | None:
  """Return the sibling list holding the node and its index in it."""
  for index, node in enumerate(elements):
    if node.id == element_id:
      return elements, index
    if node.children:
      found = find_location(node.children, element_id)
      if found is not None:
        return found
  return None


def collect_ids(elements: list[ElementNode]) -> set[str]:
  """All ids in the forest."""
  return {node.id for node in iter_elements(elements)}


def subtree_contains(node: ElementNode, element_id: str) -> bool:
  """Whether element_id is the node itself or one of its descendants."""
  return find_element([node], element_id) is not None


def remove_element(elements: list[ElementNode], element_id: str) -> ElementNode | None:
  """Detach a node (with its subtree). Returns it, or None when absent."""
  location = find_location(elements, element_id)
  if location is None:
    return None
  siblings, index = location
  return siblings.pop(index)


def insert_at(siblings: list[ElementNode], node: ElementNode, index: int | None) -> int:
  """Insert into a sibling list; out-of-range indexes append. Returns the final index."""
  if index is None or index < 0 or index > len(siblings):
    index = len(siblings)
  siblings.insert(index, node)
  return index


def assign_ids(node: ElementNode, ids: IdGenerator, taken: set[str]) -> ElementNode:
  """Give every node in the subtree an id not in ``taken``.

  Nodes that already carry an unused id keep it. ``taken`` is updated in
  place so repeated calls stay disjoint.
  """
  for current in iter_elements([node]):
    if not current.id or current.id in taken:
      current.id = _fresh_id(ids, taken)
    taken.add(current.id)
  return node


def clone_with_fresh_ids(
  node: ElementNode, ids: IdGenerator, taken: set[str]
) -> ElementNode:
  """Deep copy of a subtree where every node gets a brand new id."""
  clone = copy.deepcopy(node)
  for current in iter_elements([clone]):
    current.id = _fresh_id(ids, taken)
    taken.add(current.id)
  return clone


def _fresh_id(ids: IdGenerator, taken: set[str]) -> str:
  new_id = ids.new_id("element")
  while new_id in taken:
    new_id = ids.new_id("element")
  return new_id
