"""Unique id sources for elements, pages and versions."""

import itertools
import uuid
from typing import Protocol


class IdGenerator(Protocol):
  """Anything that hands out never-reused string ids."""

  def new_id(self, prefix: str = "element") -> str: ...


class SequentialIds:
  """Monotonic counter ids, e.g. ``element-1``, ``page-2``.

  One counter is shared across prefixes so an id is never handed out twice
  by the same generator, whatever its prefix.
  """

  def __init__(self, start: int = 1) -> None:
    self._counter = itertools.count(start)

  def new_id(self, prefix: str = "element") -> str:
    """Return the next id for the given prefix."""
    return f"{prefix}-{next(self._counter)}"


class RandomIds:
  """Random token ids, safe to mix with ids loaded from elsewhere."""

  def __init__(self, length: int = 12) -> None:
    self.length = length

  def new_id(self, prefix: str = "element") -> str:
    """Return a new random id for the given prefix."""
    return f"{prefix}-{uuid.uuid4().hex[: self.length]}"


def make_id_generator(strategy: str = "uuid") -> IdGenerator:
  """Build the id generator named by a settings strategy."""
  if strategy == "sequential":
    return SequentialIds()
  if strategy == "uuid":
    return RandomIds()
  raise ValueError(f"Unknown id strategy: {strategy}")
