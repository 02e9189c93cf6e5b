"""Identifier and label helpers shared by the analysis and selection layers."""

from __future__ import annotations

import json
import math
import re
from hashlib import blake2b
from typing import Any, Iterable, Mapping

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_WORD_SPLIT_RE = re.compile(r"[-_\s]+")

_ALPHABET_36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(num: int) -> str:
    if num == 0:
        return "0"
    chars = []
    n = num
    while n > 0:
        n, r = divmod(n, 36)
        chars.append(_ALPHABET_36[r])
    return "".join(reversed(chars))


def slugify(text: Any = "") -> str:
    """Lower-case ``text`` and collapse every non-alphanumeric run into ``-``."""

    return _SLUG_RE.sub("-", str(text or "").lower()).strip("-")


def title_case(text: str = "") -> str:
    words = [word for word in _WORD_SPLIT_RE.split(text or "") if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, bool, int, float))


def format_scalar(value: Any) -> str:
    """Stringify a scalar the way a browser would put it in a URL.

    Booleans are lower-case and integral floats drop their fraction so that
    ``1`` and ``1.0`` land on the same key.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def fingerprint(payload: Mapping[str, Any] | Any) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


def value_key(value: Any, arg_patch: Mapping[str, Any] | None) -> str:
    if is_scalar(value):
        return format_scalar(value)
    return fingerprint(arg_patch if arg_patch else value)


def format_value_label(value: Any) -> str:
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return format_scalar(value)
    if isinstance(value, str):
        return title_case(value)
    return "Variant"


def case_id(selection: Mapping[str, str]) -> str:
    parts = [f"{axis_id}-{value_id}" for axis_id, value_id in sorted(selection.items())]
    return slugify("-".join(parts))


def digest_id(parts: Iterable[Any], *, prefix: str = "", length: int = 10) -> str:
    """Short deterministic base36 id for ``parts``."""

    canonical = "|".join(str(part) for part in parts)
    digest = blake2b(canonical.encode("utf-8"), digest_size=10).digest()
    return prefix + _to_base36(int.from_bytes(digest, "big"))[:length]
