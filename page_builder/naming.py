"""Helpers for turning page names into URL slugs."""

import re

_NON_WORD_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str, *, fallback: str = "page") -> str:
  """Lowercase, hyphen-separated slug body for a page name."""
  value = _NON_WORD_RE.sub("-", value.lower().strip()).strip("-")
  return value[:120] or fallback


def page_slug(name: str) -> str:
  """URL path for a page name, e.g. ``About Us`` -> ``/about-us``."""
  return f"/{slugify(name)}"


def normalize_slug(value: str) -> str:
  """Ensure a user-supplied slug is a path with a single leading slash."""
  return "/" + value.strip().lstrip("/")


def copy_slug(slug: str) -> str:
  """Slug for a duplicated page."""
  base = slug.rstrip("/") or "/home"
  return f"{base}-copy"


def unique_slug(base: str, used: set[str]) -> str:
  """Disambiguate a slug by appending -2, -3, ... until it is unused."""
  slug = base
  counter = 2
  while slug in used:
    slug = f"{base}-{counter}"
    counter += 1
  return slug
