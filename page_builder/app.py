"""Flask JSON API exposing the page builder workspace to the admin panels."""

import os
from typing import Any

from flask import Blueprint, Flask, current_app, jsonify, request

from .canvas import canvas_click, canvas_state
from .config import BuilderSettings, load_settings
from .errors import NoCurrentPageError, NotFoundError, WorkspaceClosedError
from .logger import configure_logging, get_logger
from .placement import PlacementEngine
from .store import DocumentStore

logger = get_logger(__name__)

bp = Blueprint("builder", __name__, url_prefix="/builder")

STORE_KEY = "page_builder.store"
ENGINE_KEY = "page_builder.placement"


def create_app(
  store: DocumentStore | None = None,
  settings: BuilderSettings | None = None,
) -> Flask:
  """Build the Flask app around one workspace."""
  settings = settings or load_settings()
  configure_logging(settings.log_level)

  app = Flask(__name__)
  app.secret_key = os.environ.get("SECRET_KEY", os.urandom(24))

  store = store or DocumentStore.from_settings(settings)
  app.extensions[STORE_KEY] = store
  app.extensions[ENGINE_KEY] = PlacementEngine(store)
  app.register_blueprint(bp)
  return app


def get_store() -> DocumentStore:
  """Get the workspace bound to the current app."""
  return current_app.extensions[STORE_KEY]


def get_engine() -> PlacementEngine:
  """Get the placement engine bound to the current app."""
  return current_app.extensions[ENGINE_KEY]


@bp.errorhandler(NotFoundError)
def handle_not_found(e: NotFoundError) -> Any:
  return jsonify({"error": str(e)}), 404


@bp.errorhandler(NoCurrentPageError)
def handle_no_current_page(e: NoCurrentPageError) -> Any:
  return jsonify({"error": str(e)}), 409


@bp.errorhandler(WorkspaceClosedError)
def handle_closed(e: WorkspaceClosedError) -> Any:
  return jsonify({"error": str(e)}), 410


@bp.errorhandler(ValueError)
def handle_bad_request(e: ValueError) -> Any:
  return jsonify({"error": str(e)}), 400


def _json_body() -> dict[str, Any]:
  data = request.get_json(silent=True)
  if not isinstance(data, dict):
    raise ValueError("No data provided")
  return data


def _parse_index(value: Any) -> int | None:
  if value is None:
    return None
  if isinstance(value, bool) or not isinstance(value, int):
    raise ValueError("index must be an integer")
  return value


def _element_payload(data: dict[str, Any]) -> Any:
  """An element literal from the body, or a palette component by id."""
  if data.get("component_id"):
    return get_store().catalog.component_element(data["component_id"])
  element = data.get("element")
  if not isinstance(element, dict):
    raise ValueError("element or component_id required")
  return element


# Catalog
@bp.route("/templates")
def builder_templates() -> Any:
  """API: List available templates."""
  return jsonify({"templates": get_store().catalog.get_templates()})


@bp.route("/components")
def builder_components() -> Any:
  """API: List palette components, by category or search term."""
  catalog = get_store().catalog
  term = request.args.get("q")
  if term:
    categories = catalog.search_components(term)
    return jsonify(
      {
        "categories": [
          {
            "id": c.id,
            "name": c.name,
            "components": [vars(comp) for comp in c.components],
          }
          for c in categories
        ]
      }
    )
  category = request.args.get("category")
  return jsonify({"components": [vars(c) for c in catalog.get_components(category)]})


# Pages
@bp.route("/pages")
def builder_pages() -> Any:
  """API: List pages."""
  store = get_store()
  current = store.get_current_page()
  return jsonify(
    {
      "pages": [p.summary() for p in store.list_pages()],
      "currentPageId": current.id if current else None,
    }
  )


@bp.route("/pages/new", methods=["POST"])
def builder_new_page() -> Any:
  """Create a new page, optionally from a template."""
  data = _json_body()
  name = data.get("name", "New Page")
  page = get_store().create_page(name, data.get("template"))
  return jsonify({"success": True, "page": page.to_dict()})


@bp.route("/pages/<page_id>")
def builder_get_page(page_id: str) -> Any:
  """API: Full structure of one page."""
  return jsonify({"page": get_store().get_page(page_id).to_dict()})


@bp.route("/pages/<page_id>/load", methods=["POST"])
def builder_load_page(page_id: str) -> Any:
  """Make a page current. Stale ids are ignored."""
  store = get_store()
  store.load_page(page_id)
  current = store.get_current_page()
  return jsonify({"success": True, "currentPageId": current.id if current else None})


@bp.route("/pages/<page_id>/duplicate", methods=["POST"])
def builder_duplicate_page(page_id: str) -> Any:
  """Copy a page."""
  page = get_store().duplicate_page(page_id)
  return jsonify({"success": True, "page": page.to_dict()})


@bp.route("/pages/<page_id>/delete", methods=["POST"])
def builder_delete_page(page_id: str) -> Any:
  """Delete a page."""
  get_store().delete_page(page_id)
  return jsonify({"success": True})


@bp.route("/page")
def builder_current_page() -> Any:
  """API: The current page, or null."""
  page = get_store().get_current_page()
  return jsonify({"page": page.to_dict() if page else None})


@bp.route("/page/save", methods=["POST"])
def builder_save_page() -> Any:
  """Stamp the current page as saved and return its structure."""
  page = get_store().save_page()
  return jsonify({"success": True, "page": page.to_dict()})


@bp.route("/page/settings", methods=["POST"])
def builder_page_settings() -> Any:
  """Update name, slug, SEO and custom code of the current page."""
  data = _json_body()
  page = get_store().update_page_settings(
    name=data.get("name"),
    slug=data.get("slug"),
    seo=data.get("seo"),
    custom_css=data.get("customCSS"),
    custom_js=data.get("customJS"),
  )
  return jsonify({"success": True, "page": page.to_dict()})


# Elements
@bp.route("/elements", methods=["POST"])
def builder_add_element() -> Any:
  """Insert an element at the root or under a container."""
  data = _json_body()
  element_id = get_store().add_element(
    _element_payload(data),
    data.get("parent_id"),
    _parse_index(data.get("index")),
  )
  return jsonify({"success": True, "id": element_id})


@bp.route("/elements/<element_id>")
def builder_get_element(element_id: str) -> Any:
  """API: One element of the current page."""
  node = get_store().find_element(element_id)
  if node is None:
    raise NotFoundError(f"Element {element_id} not found")
  return jsonify({"element": node.to_dict()})


@bp.route("/elements/<element_id>/update", methods=["POST"])
def builder_update_element(element_id: str) -> Any:
  """Patch an element."""
  data = _json_body()
  node = get_store().update_element(element_id, data)
  return jsonify({"success": True, "element": node.to_dict()})


@bp.route("/elements/<element_id>/delete", methods=["POST"])
def builder_delete_element(element_id: str) -> Any:
  """Delete an element; repeated deletes succeed."""
  removed = get_store().delete_element(element_id)
  return jsonify({"success": True, "removed": removed})


@bp.route("/elements/<element_id>/duplicate", methods=["POST"])
def builder_duplicate_element(element_id: str) -> Any:
  """Duplicate an element next to itself."""
  new_id = get_store().duplicate_element(element_id)
  return jsonify({"success": True, "id": new_id})


@bp.route("/elements/<element_id>/move", methods=["POST"])
def builder_move_element(element_id: str) -> Any:
  """Move an element to another container or position."""
  data = request.get_json(silent=True) or {}
  get_store().move_element(
    element_id,
    data.get("parent_id"),
    _parse_index(data.get("index")),
  )
  return jsonify({"success": True})


# Selection, preview and panels
@bp.route("/state")
def builder_state() -> Any:
  """API: Selection, preview and panel state."""
  store = get_store()
  selected = store.get_selected_element()
  return jsonify(
    {
      **store.selection.to_dict(),
      "selectedElement": selected.to_dict() if selected else None,
    }
  )


@bp.route("/selection", methods=["POST"])
def builder_select() -> Any:
  """Select an element programmatically (null clears)."""
  data = request.get_json(silent=True) or {}
  get_store().select_element(data.get("element_id"))
  return jsonify({"success": True})


@bp.route("/preview", methods=["POST"])
def builder_preview_mode() -> Any:
  """Set the preview device."""
  data = _json_body()
  store = get_store()
  store.set_preview_mode(data.get("mode", ""))
  return jsonify({"success": True, "previewMode": store.get_preview_mode()})


@bp.route("/preview/toggle", methods=["POST"])
def builder_toggle_preview() -> Any:
  """Toggle read-only preview."""
  enabled = get_store().toggle_preview_mode()
  if enabled:
    get_engine().cancel()
  return jsonify({"success": True, "isPreviewMode": enabled})


@bp.route("/panel", methods=["POST"])
def builder_panel() -> Any:
  """Open a side panel (null closes)."""
  data = request.get_json(silent=True) or {}
  get_store().set_active_panel(data.get("panel"))
  return jsonify({"success": True})


# Versions
@bp.route("/versions", methods=["GET", "POST"])
def builder_versions() -> Any:
  """List or create versions of the current page."""
  store = get_store()
  if request.method == "POST":
    data = _json_body()
    name = data.get("name")
    if not name:
      raise ValueError("name required")
    version = store.create_version(name)
    return jsonify({"success": True, "version": version.to_dict()})

  page = store.get_current_page()
  if page is None:
    raise NoCurrentPageError()
  return jsonify(
    {
      "versions": [
        {
          "id": v.id,
          "name": v.name,
          "createdAt": v.created_at,
          "isPublished": v.is_published,
        }
        for v in page.versions
      ]
    }
  )


@bp.route("/versions/<version_id>/load", methods=["POST"])
def builder_load_version(version_id: str) -> Any:
  """Restore the current page from a version."""
  page = get_store().load_version(version_id)
  return jsonify({"success": True, "page": page.to_dict()})


@bp.route("/versions/<version_id>/publish", methods=["POST"])
def builder_publish_version(version_id: str) -> Any:
  """Mark a version as published."""
  version = get_store().publish_version(version_id)
  return jsonify({"success": True, "version": version.to_dict()})


# Canvas gestures
@bp.route("/canvas")
def builder_canvas() -> Any:
  """API: Canvas width, empty state and overlays in paint order."""
  return jsonify(canvas_state(get_store(), get_engine().drop_zone))


@bp.route("/canvas/click", methods=["POST"])
def builder_canvas_click() -> Any:
  """Canvas click: select an element or clear on background."""
  data = request.get_json(silent=True) or {}
  handled = canvas_click(get_store(), data.get("element_id"))
  return jsonify({"success": True, "handled": handled})


@bp.route("/canvas/hover", methods=["POST"])
def builder_canvas_hover() -> Any:
  """Pointer moved over an element (null when it left)."""
  data = request.get_json(silent=True) or {}
  get_store().hover_element(data.get("element_id"))
  return jsonify({"success": True})


@bp.route("/insert", methods=["POST"])
def builder_click_insert() -> Any:
  """Palette click: append to the page root."""
  data = _json_body()
  element_id = get_engine().click_insert(_element_payload(data))
  return jsonify({"success": element_id is not None, "id": element_id})


@bp.route("/drag/start", methods=["POST"])
def builder_drag_start() -> Any:
  """Begin dragging a palette element."""
  data = _json_body()
  started = get_engine().drag_start(_element_payload(data))
  return jsonify({"success": started, "state": get_engine().state.value})


@bp.route("/drag/hover", methods=["POST"])
def builder_drag_hover() -> Any:
  """Pointer is over a drop zone."""
  data = request.get_json(silent=True) or {}
  engine = get_engine()
  accepted = engine.hover(data.get("parent_id"), _parse_index(data.get("index")))
  return jsonify({"success": accepted, "state": engine.state.value, "dropZone": engine.drop_zone})


@bp.route("/drag/leave", methods=["POST"])
def builder_drag_leave() -> Any:
  """Pointer left the drop zones."""
  engine = get_engine()
  engine.leave()
  return jsonify({"success": True, "state": engine.state.value})


@bp.route("/drag/drop", methods=["POST"])
def builder_drag_drop() -> Any:
  """Commit the drag."""
  engine = get_engine()
  element_id = engine.drop()
  return jsonify({"success": element_id is not None, "id": element_id, "state": engine.state.value})


@bp.route("/drag/cancel", methods=["POST"])
def builder_drag_cancel() -> Any:
  """Abort the drag."""
  engine = get_engine()
  engine.cancel()
  return jsonify({"success": True, "state": engine.state.value})


if __name__ == "__main__":
  create_app().run(debug=True, host="0.0.0.0", port=8000, threaded=False)
