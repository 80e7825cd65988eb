"""Exceptions raised by the page builder core."""


class BuilderError(Exception):
  """Base class for all page builder errors."""


class NotFoundError(BuilderError):
  """A referenced element, page, version or template id does not exist."""


class InvalidTargetError(NotFoundError):
  """A placement target cannot accept children.

  Subclasses NotFoundError so callers of add_element see a missing container,
  while the placement engine can catch it specifically and fall back to a
  root append.
  """


class NoCurrentPageError(BuilderError):
  """An element operation was attempted with no current page loaded."""

  def __init__(self, message: str = "No current page loaded") -> None:
    super().__init__(message)


class WorkspaceClosedError(BuilderError):
  """The document store was closed and can no longer be used."""

  def __init__(self, message: str = "Workspace is closed") -> None:
    super().__init__(message)
