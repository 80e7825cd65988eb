"""Central logging configuration for the page builder."""

import logging

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
  """Return a module-level logger with default configuration applied."""
  logger = logging.getLogger(name)
  if not logging.getLogger().handlers:
    logging.basicConfig(level=_DEFAULT_LEVEL, format=_FORMAT)
  return logger


def configure_logging(level: str | int = _DEFAULT_LEVEL) -> None:
  """Set the level of the page_builder logger hierarchy."""
  if isinstance(level, str):
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
      raise ValueError(f"Unknown log level: {level}")
    level = resolved
  get_logger("page_builder").setLevel(level)
