"""
Identifier Generation Module

Unique id factories injected into the workspace store.
"""

import itertools
import uuid
from typing import Callable

IdFactory = Callable[[], str]


def uuid_id() -> str:
    """Random UUID4 string, the default id factory."""
    return str(uuid.uuid4())


def sequential_ids(prefix: str = "id") -> IdFactory:
    """
    Build a deterministic id factory yielding prefix-1, prefix-2, ...

    Useful wherever reproducible ids are needed (tests, demos).
    """
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"
