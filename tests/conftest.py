"""Pytest fixtures for page builder tests."""

import pytest
from flask import Flask
from flask.testing import FlaskClient

from page_builder.app import create_app
from page_builder.catalog import BuilderCatalog
from page_builder.config import BuilderSettings
from page_builder.ids import SequentialIds
from page_builder.placement import PlacementEngine
from page_builder.store import DocumentStore


@pytest.fixture
def catalog() -> BuilderCatalog:
  """Catalog backed by the packaged template and component data."""
  return BuilderCatalog()


@pytest.fixture
def store(catalog: BuilderCatalog) -> DocumentStore:
  """Store with predictable ids and no page loaded."""
  return DocumentStore(catalog=catalog, ids=SequentialIds())


@pytest.fixture
def page_store(store: DocumentStore) -> DocumentStore:
  """Store with one empty current page named Home."""
  store.create_page("Home")
  return store


@pytest.fixture
def engine(page_store: DocumentStore) -> PlacementEngine:
  """Placement engine over a store with a current page."""
  return PlacementEngine(page_store)


@pytest.fixture
def app(store: DocumentStore) -> Flask:
  """Flask app wrapping the test store."""
  app = create_app(store=store, settings=BuilderSettings(id_strategy="sequential"))
  app.config["TESTING"] = True
  return app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
  """Flask test client."""
  return app.test_client()

