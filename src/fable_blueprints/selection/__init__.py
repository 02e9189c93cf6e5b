from .codec import decode_selection, encode_selection
from .normalize import normalize_selection, selection_args
from .store import SelectionStore, story_key
from .urls import build_story_url, parse_story_search_params

__all__ = [
    "SelectionStore",
    "build_story_url",
    "decode_selection",
    "encode_selection",
    "normalize_selection",
    "parse_story_search_params",
    "selection_args",
    "story_key",
]
