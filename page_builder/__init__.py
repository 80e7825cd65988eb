"""Page builder document model, placement engine and admin API."""

from .builder_config import ElementNode, Page, PageVersion, SEOSettings
from .catalog import BuilderCatalog
from .config import BuilderSettings, load_settings
from .errors import (
  BuilderError,
  InvalidTargetError,
  NoCurrentPageError,
  NotFoundError,
  WorkspaceClosedError,
)
from .ids import RandomIds, SequentialIds
from .placement import GestureState, PlacementEngine
from .selection import SelectionState
from .store import DocumentStore
from .templates import TemplateInstantiator

__all__ = [
  "BuilderCatalog",
  "BuilderError",
  "BuilderSettings",
  "DocumentStore",
  "ElementNode",
  "GestureState",
  "InvalidTargetError",
  "NoCurrentPageError",
  "NotFoundError",
  "Page",
  "PageVersion",
  "PlacementEngine",
  "RandomIds",
  "SEOSettings",
  "SelectionState",
  "SequentialIds",
  "TemplateInstantiator",
  "WorkspaceClosedError",
  "load_settings",
]
