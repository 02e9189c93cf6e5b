"""Story URLs: path slugs, plain arg overrides, and the ``perm``/``auto`` pair."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

from fable_blueprints.models.registry import StoryGroup
from fable_blueprints.selection.codec import decode_selection, encode_selection
from fable_blueprints.utils.ids import format_scalar, slugify

PERM_PARAM = "perm"
AUTO_PARAM = "auto"

_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class StoryRef:
    group_index: int
    name: str


def coerce_value(text: str) -> Any:
    if text == "true":
        return True
    if text == "false":
        return False
    stripped = text.strip()
    if _INT_RE.match(stripped):
        return int(stripped)
    if _NUMBER_RE.match(stripped):
        return float(stripped)
    return text


def parse_story_search_params(
    query: str | Mapping[str, str] | None,
) -> Tuple[Dict[str, Any], Dict[str, str] | None]:
    """Split a query into coerced args and the permutation selection.

    ``perm`` only counts when ``auto=1`` accompanies it.
    """

    if query is None:
        pairs: Sequence[Tuple[str, str]] = []
    elif isinstance(query, str):
        pairs = parse_qsl(query.lstrip("?"), keep_blank_values=True)
    else:
        pairs = list(query.items())

    args: Dict[str, Any] = {}
    token: str | None = None
    auto = False
    for key, value in pairs:
        if key == PERM_PARAM:
            token = value
        elif key == AUTO_PARAM:
            auto = value == "1"
        else:
            args[key] = coerce_value(value)
    permutation = decode_selection(token) if auto else None
    return args, permutation


def build_story_path(groups: Sequence[StoryGroup], group_index: int, story_name: str) -> str:
    if not 0 <= group_index < len(groups):
        return "/"
    group = groups[group_index]
    component_slug = slugify(group.meta.title or group.meta.component or "")
    return f"/components/{component_slug}/{slugify(story_name)}"


def build_story_url(
    groups: Sequence[StoryGroup],
    group_index: int,
    story_name: str,
    args: Mapping[str, Any] | None = None,
    permutation: Mapping[str, str] | None = None,
) -> str:
    path = build_story_path(groups, group_index, story_name)
    params: Dict[str, str] = {}
    for key, value in (args or {}).items():
        if value is not None:
            params[key] = format_scalar(value)
    token = encode_selection(permutation)
    if token:
        params[PERM_PARAM] = token
        params[AUTO_PARAM] = "1"
    search = urlencode(params)
    return f"{path}?{search}" if search else path


def find_story_by_slugs(
    groups: Sequence[StoryGroup],
    component_slug: str,
    story_slug: str,
) -> StoryRef | None:
    if not groups or not component_slug or not story_slug:
        return None
    for index, group in enumerate(groups):
        if slugify(group.meta.title or group.meta.component or "") != component_slug:
            continue
        for name in group.stories:
            if slugify(name) == story_slug:
                return StoryRef(index, name)
    return None


def default_story(groups: Sequence[StoryGroup]) -> StoryRef | None:
    if not groups or not groups[0].stories:
        return None
    return StoryRef(0, next(iter(groups[0].stories)))


def split_story_url(url: str) -> Tuple[str, str, str] | None:
    """Return ``(component_slug, story_slug, query)`` for a story URL."""

    parts = urlsplit(url)
    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) != 3 or segments[0] != "components":
        return None
    return segments[1], segments[2], parts.query
