"""Data classes for the page document model."""

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ElementNode:
  """One placeable unit in a page's content tree.

  An empty ``id`` marks a literal that has not been inserted yet (palette
  entries, template definitions, drag payloads).
  """

  id: str
  type: str
  content: dict[str, Any] = field(default_factory=dict)
  styles: dict[str, Any] = field(default_factory=dict)
  props: dict[str, Any] = field(default_factory=dict)
  # None for leaves; a list (possibly empty) for containers
  children: list["ElementNode"] | None = None

  def to_dict(self) -> dict[str, Any]:
    """Structural dump of the node and its subtree."""
    data: dict[str, Any] = {
      "id": self.id,
      "type": self.type,
      "content": copy.deepcopy(self.content),
      "styles": copy.deepcopy(self.styles),
      "props": copy.deepcopy(self.props),
    }
    if self.children is not None:
      data["children"] = [child.to_dict() for child in self.children]
    return data


@dataclass
class SEOSettings:
  """Search metadata for a page."""

  title: str = ""
  description: str = ""
  keywords: list[str] = field(default_factory=list)

  def to_dict(self) -> dict[str, Any]:
    return {
      "title": self.title,
      "description": self.description,
      "keywords": list(self.keywords),
    }


@dataclass
class PageVersion:
  """A named, immutable snapshot of a page."""

  id: str
  name: str
  elements: list[ElementNode]
  # name, slug, seo, customCSS, customJS at snapshot time
  metadata: dict[str, Any] = field(default_factory=dict)
  created_at: str = ""
  is_published: bool = False

  def to_dict(self) -> dict[str, Any]:
    return {
      "id": self.id,
      "name": self.name,
      "elements": [el.to_dict() for el in self.elements],
      "metadata": copy.deepcopy(self.metadata),
      "createdAt": self.created_at,
      "isPublished": self.is_published,
    }


@dataclass
class Page:
  """One routable document: an element forest plus metadata."""

  id: str
  name: str
  slug: str
  template: str = "custom"
  elements: list[ElementNode] = field(default_factory=list)
  seo: SEOSettings = field(default_factory=SEOSettings)
  custom_css: str = ""
  custom_js: str = ""
  created_at: str = ""
  updated_at: str = ""
  versions: list[PageVersion] = field(default_factory=list)

  def metadata_snapshot(self) -> dict[str, Any]:
    """Copy of the page-level metadata stored alongside a version."""
    return {
      "name": self.name,
      "slug": self.slug,
      "seo": self.seo.to_dict(),
      "customCSS": self.custom_css,
      "customJS": self.custom_js,
    }

  def to_dict(self) -> dict[str, Any]:
    return {
      "id": self.id,
      "name": self.name,
      "slug": self.slug,
      "template": self.template,
      "elements": [el.to_dict() for el in self.elements],
      "seo": self.seo.to_dict(),
      "customCSS": self.custom_css,
      "customJS": self.custom_js,
      "createdAt": self.created_at,
      "updatedAt": self.updated_at,
      "versions": [v.to_dict() for v in self.versions],
    }

  def summary(self) -> dict[str, Any]:
    """Short listing form used by page pickers."""
    return {
      "id": self.id,
      "name": self.name,
      "slug": self.slug,
      "template": self.template,
      "updatedAt": self.updated_at,
    }


@dataclass
class TemplateDefinition:
  """A named, pre-built element tree used to seed new pages."""

  key: str
  name: str
  description: str
  # Raw element literals, never handed out directly
  elements: list[dict[str, Any]]


@dataclass
class PaletteComponent:
  """A palette entry that produces an element literal."""

  id: str
  name: str
  description: str
  category: str
  element: dict[str, Any]


@dataclass
class ComponentCategory:
  """A group of palette entries."""

  id: str
  name: str
  components: list[PaletteComponent]


def dict_to_element(d: dict[str, Any] | ElementNode) -> ElementNode:
  """Convert a dictionary to an ElementNode (deep copy)."""
  if isinstance(d, ElementNode):
    return copy.deepcopy(d)
  if "type" not in d:
    raise ValueError("Element is missing a type")
  children = d.get("children")
  return ElementNode(
    id=str(d.get("id") or ""),
    type=d["type"],
    content=copy.deepcopy(d.get("content") or {}),
    styles=copy.deepcopy(d.get("styles") or {}),
    props=copy.deepcopy(d.get("props") or {}),
    children=None if children is None else [dict_to_element(c) for c in children],
  )


def dict_to_seo(d: dict[str, Any]) -> SEOSettings:
  """Convert a dictionary to SEOSettings."""
  return SEOSettings(
    title=d.get("title", ""),
    description=d.get("description", ""),
    keywords=list(d.get("keywords", [])),
  )


def dict_to_version(d: dict[str, Any]) -> PageVersion:
  """Convert a dictionary to a PageVersion."""
  return PageVersion(
    id=d["id"],
    name=d["name"],
    elements=[dict_to_element(el) for el in d.get("elements", [])],
    metadata=copy.deepcopy(d.get("metadata", {})),
    created_at=d.get("createdAt", ""),
    is_published=d.get("isPublished", False),
  )


def dict_to_page(d: dict[str, Any]) -> Page:
  """Convert a dictionary to a Page."""
  return Page(
    id=d["id"],
    name=d["name"],
    slug=d["slug"],
    template=d.get("template", "custom"),
    elements=[dict_to_element(el) for el in d.get("elements", [])],
    seo=dict_to_seo(d.get("seo", {})),
    custom_css=d.get("customCSS", ""),
    custom_js=d.get("customJS", ""),
    created_at=d.get("createdAt", ""),
    updated_at=d.get("updatedAt", ""),
    versions=[dict_to_version(v) for v in d.get("versions", [])],
  )


def dict_to_template(key: str, d: dict[str, Any]) -> TemplateDefinition:
  """Convert a catalog entry to a TemplateDefinition."""
  return TemplateDefinition(
    key=key,
    name=d["name"],
    description=d.get("description", ""),
    elements=copy.deepcopy(d.get("elements", [])),
  )


def dict_to_component(d: dict[str, Any], category: str) -> PaletteComponent:
  """Convert a palette entry to a PaletteComponent."""
  return PaletteComponent(
    id=d["id"],
    name=d["name"],
    description=d.get("description", ""),
    category=category,
    element=copy.deepcopy(d["element"]),
  )


def dict_to_category(d: dict[str, Any]) -> ComponentCategory:
  """Convert a palette category to a ComponentCategory."""
  return ComponentCategory(
    id=d["id"],
    name=d.get("name", d["id"]),
    components=[dict_to_component(c, d["id"]) for c in d.get("components", [])],
  )
