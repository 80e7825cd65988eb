"""Static template and component palette definitions."""

import copy
import json
from pathlib import Path
from typing import Any

from .builder_config import (
  ComponentCategory,
  ElementNode,
  PaletteComponent,
  TemplateDefinition,
  dict_to_category,
  dict_to_element,
  dict_to_template,
)
from .errors import NotFoundError
from .logger import get_logger

DEFAULT_DATA_DIR = Path(__file__).parent / "data"

logger = get_logger(__name__)


class BuilderCatalog:
  """Read-only catalog of page templates and palette components."""

  def __init__(self, data_dir: Path | str | None = None) -> None:
    self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    self._templates: dict[str, TemplateDefinition] = {}
    self._categories: list[ComponentCategory] = []
    self._load_definitions()

  def _load_definitions(self) -> None:
    """Load template and component definitions."""
    # Load templates
    templates_file = self.data_dir / "templates.json"
    if templates_file.exists():
      with open(templates_file) as f:
        data = json.load(f)
        for tmpl in data.get("templates", []):
          self._templates[tmpl["id"]] = dict_to_template(tmpl["id"], tmpl)

    # Load palette components
    components_file = self.data_dir / "components.json"
    if components_file.exists():
      with open(components_file) as f:
        data = json.load(f)
        for category in data.get("categories", []):
          self._categories.append(dict_to_category(category))

    logger.debug(
      "Loaded %d templates and %d component categories from %s",
      len(self._templates),
      len(self._categories),
      self.data_dir,
    )

  def get_template(self, key: str) -> TemplateDefinition:
    """Get a copy of a template definition."""
    template = self._templates.get(key)
    if template is None:
      raise NotFoundError(f"Template {key} not found")
    return copy.deepcopy(template)

  def get_templates(self) -> list[dict[str, Any]]:
    """Get display info for available templates."""
    return [
      {"id": t.key, "name": t.name, "description": t.description}
      for t in self._templates.values()
    ]

  def has_template(self, key: str) -> bool:
    return key in self._templates

  def get_categories(self) -> list[ComponentCategory]:
    """Get all palette categories."""
    return copy.deepcopy(self._categories)

  def get_components(self, category: str | None = None) -> list[PaletteComponent]:
    """Get palette components, optionally filtered by category."""
    components = [c for cat in self._categories for c in cat.components]
    if category:
      components = [c for c in components if c.category == category]
    return copy.deepcopy(components)

  def search_components(self, term: str) -> list[ComponentCategory]:
    """Filter categories to components whose name or description match.

    Matching is case-insensitive; categories left empty are dropped.
    """
    needle = term.lower()
    results: list[ComponentCategory] = []
    for category in self._categories:
      matches = [
        c
        for c in category.components
        if needle in c.name.lower() or needle in c.description.lower()
      ]
      if matches:
        results.append(
          ComponentCategory(
            id=category.id,
            name=category.name,
            components=copy.deepcopy(matches),
          )
        )
    return results

  def component_element(self, component_id: str) -> ElementNode:
    """Fresh element literal (no id) for a palette component."""
    for category in self._categories:
      for component in category.components:
        if component.id == component_id:
          return dict_to_element(component.element)
    raise NotFoundError(f"Component {component_id} not found")
