"""Compact, query-safe text encoding of a permutation selection.

``variant.primary+disabled.true`` -- pairs joined by ``+``, each pair an
axis id and a value id separated by a single ``.``. Both halves are
percent-encoded with ``.`` and ``+`` escaped, so the first ``.`` in a pair is
always the separator.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping
from urllib.parse import quote, unquote

from fable_blueprints.utils.ids import format_scalar

PAIR_SEPARATOR = "+"
ASSIGN_SEPARATOR = "."


def _escape(text: str) -> str:
    return quote(text, safe="").replace(".", "%2E")


def encode_selection(selection: Mapping[str, Any] | None) -> str:
    if not selection:
        return ""
    pairs = []
    for axis_id, value_id in selection.items():
        if value_id is None or value_id == "" or not axis_id:
            continue
        pairs.append(f"{_escape(str(axis_id))}{ASSIGN_SEPARATOR}{_escape(format_scalar(value_id))}")
    return PAIR_SEPARATOR.join(pairs)


def decode_selection(token: str | None) -> Dict[str, str] | None:
    """Parse a token back into ``{axis_id: value_id}``.

    Malformed pairs are skipped; ``None`` when nothing usable remains.
    """

    if not token:
        return None
    selection: Dict[str, str] = {}
    for pair in token.split(PAIR_SEPARATOR):
        axis_part, sep, value_part = pair.partition(ASSIGN_SEPARATOR)
        if not sep or not axis_part or not value_part:
            continue
        axis_id = unquote(axis_part)
        if axis_id:
            selection[axis_id] = unquote(value_part)
    return selection or None
