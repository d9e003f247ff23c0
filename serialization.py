"""JSON helpers for LargeInteger values.

JSON has no integer type wide enough for a LargeInteger, so values are
written as decimal strings tagged with an ``n`` suffix (``"123n"``) and
turned back into LargeIntegers on read.

    text = dumps({"balance": value})
    data = loads(text)
"""

from __future__ import annotations

import json
import re
from typing import Any

from dispatch import Dispatcher, default_dispatcher
from provider import LargeInteger

SUFFIX = "n"

_TAGGED = re.compile(r"-?[0-9]+n")


def replacer(value: Any) -> str:
    """``default=`` hook for ``json.dumps``."""
    if isinstance(value, LargeInteger):
        return str(value) + SUFFIX
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def reviver(value: Any, dispatcher: Dispatcher | None = None) -> Any:
    """Turn one tagged string back into a LargeInteger; pass others through."""
    if isinstance(value, str) and _TAGGED.fullmatch(value):
        if dispatcher is None:
            dispatcher = default_dispatcher()
        return dispatcher.from_value(value[: -len(SUFFIX)])
    return value


def revive(tree: Any, dispatcher: Dispatcher | None = None) -> Any:
    """Apply ``reviver`` to every value in a decoded JSON tree."""
    if isinstance(tree, dict):
        return {k: revive(v, dispatcher) for k, v in tree.items()}
    if isinstance(tree, list):
        return [revive(v, dispatcher) for v in tree]
    return reviver(tree, dispatcher)


def dumps(obj: Any, **kwargs: Any) -> str:
    return json.dumps(obj, default=replacer, **kwargs)


def loads(text: str | bytes, dispatcher: Dispatcher | None = None, **kwargs: Any) -> Any:
    return revive(json.loads(text, **kwargs), dispatcher)
