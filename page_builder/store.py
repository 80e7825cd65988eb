"""In-memory document store: pages, the current page and element mutations."""

import copy
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from .builder_config import (
  ElementNode,
  Page,
  PageVersion,
  SEOSettings,
  dict_to_element,
  dict_to_seo,
)
from .catalog import BuilderCatalog
from .config import BuilderSettings
from .elements import (
  CONTAINER_TYPES,
  assign_ids,
  clone_with_fresh_ids,
  collect_ids,
  find_element,
  find_location,
  insert_at,
  is_container,
  iter_elements,
  remove_element,
  subtree_contains,
)
from .errors import InvalidTargetError, NoCurrentPageError, NotFoundError, WorkspaceClosedError
from .ids import IdGenerator, RandomIds, make_id_generator
from .logger import get_logger
from .naming import copy_slug, normalize_slug, page_slug, unique_slug
from .selection import SelectionState
from .templates import TemplateInstantiator

logger = get_logger(__name__)

ElementInput = ElementNode | Mapping[str, Any]


def _now() -> str:
  return datetime.now(UTC).isoformat()


class DocumentStore:
  """The builder workspace: every page plus the canvas state around them.

  One store is one workspace. It is created active, and ``close()`` tears it
  down; every call after that raises WorkspaceClosedError. Element
  operations act on the current page and raise NoCurrentPageError when
  there is none.
  """

  def __init__(
    self,
    catalog: BuilderCatalog | None = None,
    ids: IdGenerator | None = None,
    container_types: Iterable[str] = CONTAINER_TYPES,
    selection: SelectionState | None = None,
  ) -> None:
    self.catalog = catalog or BuilderCatalog()
    self.ids = ids or RandomIds()
    self.container_types = frozenset(container_types)
    self.selection = selection or SelectionState()
    self.templates = TemplateInstantiator(self.catalog, self.ids)
    self._pages: dict[str, Page] = {}
    self._current_page_id: str | None = None
    self._closed = False

  @classmethod
  def from_settings(cls, settings: BuilderSettings) -> "DocumentStore":
    """Build a store configured from BuilderSettings."""
    return cls(
      catalog=BuilderCatalog(settings.data_dir),
      ids=make_id_generator(settings.id_strategy),
      container_types=settings.container_types,
      selection=SelectionState(
        preview_mode=settings.default_preview_mode,  # type: ignore[arg-type]
        active_panel=settings.default_active_panel,  # type: ignore[arg-type]
      ),
    )

  # ------------------------------------------------------------------
  # Lifecycle
  # ------------------------------------------------------------------
  @property
  def closed(self) -> bool:
    return self._closed

  def close(self) -> None:
    """Tear down the workspace and release every page."""
    if self._closed:
      return
    self._pages.clear()
    self._current_page_id = None
    self.selection.clear()
    self._closed = True
    logger.info("Workspace closed")

  def __enter__(self) -> "DocumentStore":
    self._ensure_open()
    return self

  def __exit__(self, *exc_info: object) -> None:
    self.close()

  def _ensure_open(self) -> None:
    if self._closed:
      raise WorkspaceClosedError()

  # ------------------------------------------------------------------
  # Read accessors
  # ------------------------------------------------------------------
  def list_pages(self) -> list[Page]:
    """Pages in creation order."""
    self._ensure_open()
    return list(self._pages.values())

  def get_page(self, page_id: str) -> Page:
    """Get a page by id."""
    self._ensure_open()
    page = self._pages.get(page_id)
    if page is None:
      raise NotFoundError(f"Page {page_id} not found")
    return page

  def get_current_page(self) -> Page | None:
    self._ensure_open()
    if self._current_page_id is None:
      return None
    return self._pages.get(self._current_page_id)

  def find_element(self, element_id: str) -> ElementNode | None:
    """Look up an element on the current page."""
    page = self.get_current_page()
    if page is None:
      return None
    return find_element(page.elements, element_id)

  def flatten(self) -> list[ElementNode]:
    """Every element of the current page in paint order."""
    page = self.get_current_page()
    if page is None:
      return []
    return list(iter_elements(page.elements))

  def get_selected_element(self) -> ElementNode | None:
    """Resolve the selection against the live tree."""
    element_id = self.selection.selected_element_id
    if element_id is None:
      return None
    node = self.find_element(element_id)
    if node is None:
      self.selection.select(None)
    return node

  def get_hovered_element(self) -> ElementNode | None:
    element_id = self.selection.hovered_element_id
    if element_id is None:
      return None
    node = self.find_element(element_id)
    if node is None:
      self.selection.hover(None)
    return node

  def get_preview_mode(self) -> str:
    return self.selection.preview_mode

  def is_container(self, node: ElementNode) -> bool:
    """Whether the node accepts children under this store's rules."""
    return is_container(node, self.container_types)

  # ------------------------------------------------------------------
  # Selection and preview
  # ------------------------------------------------------------------
  def select_element(self, element_id: str | None) -> None:
    """Select an element on the current page, or clear with None."""
    self._ensure_open()
    if element_id is not None:
      self._require_element(self._require_current(), element_id)
    self.selection.select(element_id)

  def hover_element(self, element_id: str | None) -> None:
    """Track the element under the pointer. Ignored in preview mode."""
    self._ensure_open()
    if self.selection.is_preview_mode:
      return
    if element_id is not None:
      self._require_element(self._require_current(), element_id)
    self.selection.hover(element_id)

  def set_preview_mode(self, mode: str) -> None:
    self._ensure_open()
    self.selection.set_preview_mode(mode)

  def toggle_preview_mode(self) -> bool:
    """Flip the preview gate. Returns the new state."""
    self._ensure_open()
    enabled = self.selection.toggle_preview()
    logger.debug("Preview mode %s", "on" if enabled else "off")
    return enabled

  def set_active_panel(self, panel: str | None) -> None:
    self._ensure_open()
    self.selection.set_active_panel(panel)

  # ------------------------------------------------------------------
  # Element operations (current page)
  # ------------------------------------------------------------------
  def add_element(
    self,
    node: ElementInput,
    parent_id: str | None = None,
    index: int | None = None,
  ) -> str:
    """Insert a copy of ``node`` at the root or under ``parent_id``.

    Nodes without an id, or with an id already used on the page, get a fresh
    one (descendants included). An out-of-range index appends. Returns the
    id of the inserted node. Selection is left untouched.
    """
    self._ensure_open()
    page = self._require_current()
    new_node = dict_to_element(node)  # type: ignore[arg-type]

    siblings = self._target_children(page, parent_id)
    assign_ids(new_node, self.ids, collect_ids(page.elements))
    position = insert_at(siblings, new_node, index)
    self._touch(page)

    logger.debug(
      "Added %s %s under %s at %d",
      new_node.type,
      new_node.id,
      parent_id or "root",
      position,
    )
    return new_node.id

  def update_element(self, element_id: str, patch: Mapping[str, Any]) -> ElementNode:
    """Shallow-merge content, styles and props; replace children wholesale."""
    self._ensure_open()
    page = self._require_current()
    node = self._require_element(page, element_id)

    patch_id = patch.get("id")
    if patch_id and patch_id != element_id:
      raise ValueError("Element ids cannot be changed")

    # Build everything first so a bad patch leaves the node untouched
    merges = {
      key: copy.deepcopy(dict(patch[key]))
      for key in ("content", "styles", "props")
      if patch.get(key) is not None
    }
    replace_children = "children" in patch
    new_children: list[ElementNode] | None = None
    if replace_children and patch["children"] is not None:
      converted = [dict_to_element(child) for child in patch["children"]]
      # Ids of the children being replaced may be reused by the new list
      taken = collect_ids(page.elements) - collect_ids(node.children or [])
      new_children = [assign_ids(child, self.ids, taken) for child in converted]

    if patch.get("type"):
      node.type = patch["type"]
    for key, values in merges.items():
      getattr(node, key).update(values)
    if replace_children:
      node.children = new_children
      self._prune_selection()

    self._touch(page)
    logger.debug("Updated element %s", element_id)
    return node

  def delete_element(self, element_id: str) -> bool:
    """Remove an element and its subtree. Missing ids are a no-op.

    Returns True when something was removed.
    """
    self._ensure_open()
    page = self._require_current()
    removed = remove_element(page.elements, element_id)
    if removed is None:
      logger.debug("Delete of missing element %s ignored", element_id)
      return False

    selected = self.selection.selected_element_id
    if selected is not None and subtree_contains(removed, selected):
      self.selection.select(None)
    hovered = self.selection.hovered_element_id
    if hovered is not None and subtree_contains(removed, hovered):
      self.selection.hover(None)

    self._touch(page)
    logger.debug("Deleted element %s", element_id)
    return True

  def duplicate_element(self, element_id: str) -> str:
    """Clone a subtree with fresh ids right after the original."""
    self._ensure_open()
    page = self._require_current()
    location = find_location(page.elements, element_id)
    if location is None:
      raise NotFoundError(f"Element {element_id} not found")

    siblings, index = location
    clone = clone_with_fresh_ids(siblings[index], self.ids, collect_ids(page.elements))
    siblings.insert(index + 1, clone)
    self._touch(page)

    logger.debug("Duplicated element %s as %s", element_id, clone.id)
    return clone.id

  def move_element(
    self,
    element_id: str,
    parent_id: str | None = None,
    index: int | None = None,
  ) -> None:
    """Detach an element and re-insert it at the target position.

    The index refers to the target list after the element was detached.
    """
    self._ensure_open()
    page = self._require_current()
    node = self._require_element(page, element_id)
    if parent_id is not None and subtree_contains(node, parent_id):
      raise InvalidTargetError(f"Cannot move element {element_id} into itself")

    # Validate before detaching so a bad target leaves the tree intact
    self._target_children(page, parent_id)
    remove_element(page.elements, element_id)
    siblings = self._target_children(page, parent_id)
    insert_at(siblings, node, index)
    self._touch(page)
    logger.debug("Moved element %s under %s", element_id, parent_id or "root")

  # ------------------------------------------------------------------
  # Page operations
  # ------------------------------------------------------------------
  def create_page(self, name: str, template_key: str | None = None) -> Page:
    """Create a blank or template-seeded page and make it current."""
    self._ensure_open()
    if not name or not name.strip():
      raise ValueError("Page name is required")

    description = ""
    elements: list[ElementNode] = []
    template = "custom"
    if template_key and template_key != "custom":
      definition = self.templates.definition(template_key)
      elements = self.templates.instantiate(template_key)
      description = definition.description
      template = template_key

    now = _now()
    page = Page(
      id=self._new_page_id(),
      name=name,
      slug=unique_slug(page_slug(name), self._used_slugs()),
      template=template,
      elements=elements,
      seo=SEOSettings(title=name, description=description),
      created_at=now,
      updated_at=now,
    )
    self._pages[page.id] = page
    self._set_current(page.id)

    logger.info("Created page %s (%s) from template %s", page.id, page.slug, template)
    return page

  def load_page(self, page_id: str) -> None:
    """Make a page current. Unknown ids are ignored."""
    self._ensure_open()
    if page_id not in self._pages:
      logger.debug("Load of unknown page %s ignored", page_id)
      return
    self._set_current(page_id)

  def duplicate_page(self, page_id: str) -> Page:
    """Copy a page with fresh element ids and no version history."""
    source = self.get_page(page_id)

    taken: set[str] = set()
    now = _now()
    page = Page(
      id=self._new_page_id(),
      name=f"{source.name} (Copy)",
      slug=unique_slug(copy_slug(source.slug), self._used_slugs()),
      template=source.template,
      elements=[clone_with_fresh_ids(el, self.ids, taken) for el in source.elements],
      seo=copy.deepcopy(source.seo),
      custom_css=source.custom_css,
      custom_js=source.custom_js,
      created_at=now,
      updated_at=now,
      versions=[],
    )
    self._pages[page.id] = page

    logger.info("Duplicated page %s as %s", page_id, page.id)
    return page

  def delete_page(self, page_id: str) -> None:
    """Remove a page; deleting the current page leaves no page current."""
    self.get_page(page_id)
    del self._pages[page_id]
    if self._current_page_id == page_id:
      self._current_page_id = None
      self.selection.clear()
    logger.info("Deleted page %s", page_id)

  def save_page(self) -> Page:
    """Stamp the current page as saved and return it."""
    self._ensure_open()
    page = self._require_current()
    self._touch(page)
    logger.info("Saved page %s", page.id)
    return page

  def update_page_settings(
    self,
    *,
    name: str | None = None,
    slug: str | None = None,
    seo: SEOSettings | Mapping[str, Any] | None = None,
    custom_css: str | None = None,
    custom_js: str | None = None,
  ) -> Page:
    """Edit metadata of the current page."""
    self._ensure_open()
    page = self._require_current()

    if name is not None and not name.strip():
      raise ValueError("Page name is required")
    new_slug = normalize_slug(slug) if slug is not None else None
    if new_slug is not None and new_slug in self._used_slugs(exclude=page.id):
      raise ValueError(f"Slug {new_slug} is already in use")
    new_seo = None
    if isinstance(seo, SEOSettings):
      new_seo = copy.deepcopy(seo)
    elif seo is not None:
      new_seo = dict_to_seo({**page.seo.to_dict(), **dict(seo)})

    if new_slug is not None:
      page.slug = new_slug
    if name is not None:
      page.name = name
    if new_seo is not None:
      page.seo = new_seo
    if custom_css is not None:
      page.custom_css = custom_css
    if custom_js is not None:
      page.custom_js = custom_js

    self._touch(page)
    return page

  # ------------------------------------------------------------------
  # Versions
  # ------------------------------------------------------------------
  def create_version(self, name: str) -> PageVersion:
    """Snapshot the current page under ``name`` (unpublished)."""
    self._ensure_open()
    page = self._require_current()
    version = PageVersion(
      id=self.ids.new_id("version"),
      name=name,
      elements=copy.deepcopy(page.elements),
      metadata=page.metadata_snapshot(),
      created_at=_now(),
      is_published=False,
    )
    page.versions.append(version)
    logger.info("Created version %s (%s) of page %s", version.id, name, page.id)
    return version

  def load_version(self, version_id: str) -> Page:
    """Restore the current page's content and metadata from a version."""
    self._ensure_open()
    page = self._require_current()
    version = self._require_version(page, version_id)

    page.elements = copy.deepcopy(version.elements)
    metadata = version.metadata
    if "name" in metadata:
      page.name = metadata["name"]
    if "seo" in metadata:
      page.seo = dict_to_seo(metadata["seo"])
    page.custom_css = metadata.get("customCSS", page.custom_css)
    page.custom_js = metadata.get("customJS", page.custom_js)
    slug = metadata.get("slug")
    if slug and slug not in self._used_slugs(exclude=page.id):
      page.slug = slug

    self._prune_selection()
    self._touch(page)
    logger.info("Restored page %s from version %s", page.id, version_id)
    return page

  def publish_version(self, version_id: str) -> PageVersion:
    """Mark one version as the published one."""
    self._ensure_open()
    page = self._require_current()
    published = self._require_version(page, version_id)
    for version in page.versions:
      version.is_published = version.id == version_id
    logger.info("Published version %s of page %s", version_id, page.id)
    return published

  # ------------------------------------------------------------------
  # Serialization
  # ------------------------------------------------------------------
  def snapshot(self) -> dict[str, Any]:
    """Structural dump of the whole workspace."""
    self._ensure_open()
    return {
      "pages": [page.to_dict() for page in self._pages.values()],
      "currentPageId": self._current_page_id,
      "selection": self.selection.to_dict(),
    }

  # ------------------------------------------------------------------
  # Internals
  # ------------------------------------------------------------------
  def _require_current(self) -> Page:
    page = self.get_current_page()
    if page is None:
      raise NoCurrentPageError()
    return page

  def _require_element(self, page: Page, element_id: str) -> ElementNode:
    node = find_element(page.elements, element_id)
    if node is None:
      raise NotFoundError(f"Element {element_id} not found")
    return node

  def _require_version(self, page: Page, version_id: str) -> PageVersion:
    for version in page.versions:
      if version.id == version_id:
        return version
    raise NotFoundError(f"Version {version_id} not found")

  def _target_children(self, page: Page, parent_id: str | None) -> list[ElementNode]:
    """Sibling list a new child of ``parent_id`` goes into."""
    if parent_id is None:
      return page.elements
    parent = self._require_element(page, parent_id)
    if not self.is_container(parent):
      raise InvalidTargetError(
        f"Element {parent_id} ({parent.type}) cannot contain other elements"
      )
    if parent.children is None:
      parent.children = []
    return parent.children

  def _set_current(self, page_id: str) -> None:
    if self._current_page_id != page_id:
      self.selection.clear()
    self._current_page_id = page_id

  def _prune_selection(self) -> None:
    """Drop selection and hover references that no longer resolve."""
    self.get_selected_element()
    self.get_hovered_element()

  def _touch(self, page: Page) -> None:
    page.updated_at = _now()

  def _new_page_id(self) -> str:
    page_id = self.ids.new_id("page")
    while page_id in self._pages:
      page_id = self.ids.new_id("page")
    return page_id

  def _used_slugs(self, exclude: str | None = None) -> set[str]:
    return {p.slug for p in self._pages.values() if p.id != exclude}
