"""Stable component names for types."""

import re
from typing import Iterable

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


def normalize_type_name(namespace: str, name: str, strip_prefixes: Iterable[str] = ()) -> str:
    """Return the component name for a type.

    The namespace is dropped when it starts with one of strip_prefixes.
    Separators and any other character not allowed in a component key are
    replaced with "_". Prefixes that make two types collide are not detected.
    """
    if any(namespace.startswith(prefix) for prefix in strip_prefixes):
        full_name = name
    else:
        full_name = f"{namespace}/{name}"
    return _UNSAFE_CHARS.sub("_", full_name)
