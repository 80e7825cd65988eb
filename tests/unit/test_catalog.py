"""Tests for the template catalog, palette and template instantiation."""

import json
import tempfile
from pathlib import Path

import pytest

from page_builder.catalog import BuilderCatalog
from page_builder.elements import collect_ids, iter_elements
from page_builder.errors import NotFoundError
from page_builder.ids import SequentialIds
from page_builder.templates import TemplateInstantiator


class TestTemplates:
  """Tests for packaged templates."""

  def test_packaged_templates(self, catalog: BuilderCatalog) -> None:
    keys = [t["id"] for t in catalog.get_templates()]
    assert keys == ["product-listing", "category", "checkout", "landing"]
    for info in catalog.get_templates():
      assert info["name"]
      assert info["description"]

  def test_get_template_returns_copy(self, catalog: BuilderCatalog) -> None:
    """Mutating a fetched definition does not touch the catalog."""
    template = catalog.get_template("landing")
    template.elements.clear()
    template.name = "Changed"

    again = catalog.get_template("landing")
    assert again.elements
    assert again.name == "Landing Page"

  def test_unknown_template(self, catalog: BuilderCatalog) -> None:
    with pytest.raises(NotFoundError, match="Template nope not found"):
      catalog.get_template("nope")
    assert not catalog.has_template("nope")
    assert catalog.has_template("checkout")

  def test_custom_data_dir(self) -> None:
    """Definitions load from any directory holding the JSON files."""
    with tempfile.TemporaryDirectory() as tmp:
      data = {
        "templates": [
          {"id": "blog", "name": "Blog", "description": "Posts", "elements": [{"type": "text"}]}
        ]
      }
      (Path(tmp) / "templates.json").write_text(json.dumps(data))

      catalog = BuilderCatalog(tmp)

    assert [t["id"] for t in catalog.get_templates()] == ["blog"]
    assert catalog.get_components() == []

  def test_missing_files_yield_empty_catalog(self) -> None:
    with tempfile.TemporaryDirectory() as tmp:
      catalog = BuilderCatalog(tmp)
    assert catalog.get_templates() == []
    assert catalog.get_categories() == []


class TestInstantiate:
  """Tests for TemplateInstantiator."""

  def test_every_node_gets_an_id(self, catalog: BuilderCatalog) -> None:
    elements = TemplateInstantiator(catalog, SequentialIds()).instantiate("product-listing")
    nodes = list(iter_elements(elements))

    assert nodes
    assert all(n.id for n in nodes)
    assert len({n.id for n in nodes}) == len(nodes)

  def test_instantiations_are_isolated(self, catalog: BuilderCatalog) -> None:
    """Two instantiations share no ids and no mutable state."""
    instantiator = TemplateInstantiator(catalog, SequentialIds())
    first = instantiator.instantiate("category")
    second = instantiator.instantiate("category")

    assert not collect_ids(first) & collect_ids(second)
    first[0].content["title"] = "Edited"
    assert second[0].content.get("title") != "Edited"
    assert catalog.get_template("category").elements[0]["content"].get("title") != "Edited"

  def test_catalog_literals_stay_unidentified(self, catalog: BuilderCatalog) -> None:
    TemplateInstantiator(catalog, SequentialIds()).instantiate("checkout")
    for literal in catalog.get_template("checkout").elements:
      assert "id" not in literal

  def test_taken_ids_are_avoided(self, catalog: BuilderCatalog) -> None:
    taken = {"element-1", "element-2"}
    elements = TemplateInstantiator(catalog, SequentialIds()).instantiate("landing", taken)
    assert "element-1" not in collect_ids(elements)

  def test_unknown_key(self, catalog: BuilderCatalog) -> None:
    with pytest.raises(NotFoundError):
      TemplateInstantiator(catalog, SequentialIds()).instantiate("nope")


class TestPalette:
  """Tests for palette components and search."""

  def test_categories(self, catalog: BuilderCatalog) -> None:
    ids = [c.id for c in catalog.get_categories()]
    assert ids == ["layout", "content", "media", "interactive", "ecommerce", "advanced"]

  def test_components_by_category(self, catalog: BuilderCatalog) -> None:
    media = catalog.get_components("media")
    assert [c.id for c in media] == ["image", "video", "gallery"]
    assert all(c.category == "media" for c in media)
    assert len(catalog.get_components()) > len(media)

  def test_search_is_case_insensitive(self, catalog: BuilderCatalog) -> None:
    results = catalog.search_components("CART")
    assert [c.id for c in results] == ["ecommerce"]
    assert [c.id for c in results[0].components] == ["cart-button"]

  def test_search_matches_description(self, catalog: BuilderCatalog) -> None:
    results = catalog.search_components("copyright")
    assert [comp.id for cat in results for comp in cat.components] == ["footer"]

  def test_search_drops_empty_categories(self, catalog: BuilderCatalog) -> None:
    assert catalog.search_components("zzz-no-match") == []

  def test_component_element_is_fresh(self, catalog: BuilderCatalog) -> None:
    node = catalog.component_element("button")
    node.content["text"] = "Mutated"

    again = catalog.component_element("button")
    assert again.id == ""
    assert again.type == "button"
    assert again.content.get("text") != "Mutated"

  def test_unknown_component(self, catalog: BuilderCatalog) -> None:
    with pytest.raises(NotFoundError, match="Component nope not found"):
      catalog.component_element("nope")
