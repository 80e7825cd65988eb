"""Expand catalog templates into freshly identified element trees."""

from .builder_config import ElementNode, TemplateDefinition, dict_to_element
from .catalog import BuilderCatalog
from .elements import assign_ids, iter_elements
from .ids import IdGenerator


class TemplateInstantiator:
  """Turn a template key into a new element forest.

  Every node of every instantiation gets an id from the shared generator,
  so two instantiations of the same template never share an id. The
  catalog is only ever read.
  """

  def __init__(self, catalog: BuilderCatalog, ids: IdGenerator) -> None:
    self.catalog = catalog
    self.ids = ids

  def definition(self, key: str) -> TemplateDefinition:
    """Look up a template. Raises NotFoundError for unknown keys."""
    return self.catalog.get_template(key)

  def instantiate(self, key: str, taken: set[str] | None = None) -> list[ElementNode]:
    """Build a fresh element forest for the template.

    ``taken`` lets callers reserve ids already used by the target page.
    """
    template = self.definition(key)
    used = taken if taken is not None else set()
    elements: list[ElementNode] = []
    for literal in template.elements:
      node = dict_to_element(literal)
      # Template literals never carry ids; clear any that slipped in
      for current in iter_elements([node]):
        current.id = ""
      elements.append(assign_ids(node, self.ids, used))
    return elements
