"""Command-line entry point for inspecting permutation blueprints."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, List

from fable_blueprints.catalog.loader import load_catalog
from fable_blueprints.config.settings import BlueprintSettings
from fable_blueprints.models.blueprint import Blueprint
from fable_blueprints.models.registry import StoryGroup
from fable_blueprints.permutations.assembler import BlueprintEngine
from fable_blueprints.reporting import catalog_cases_frame
from fable_blueprints.selection.codec import encode_selection
from fable_blueprints.selection.normalize import normalize_selection
from fable_blueprints.utils.errors import BPError, Err


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze component stories into permutation blueprints")
    parser.add_argument("catalog", help="Path to a JSON or YAML catalog file")
    parser.add_argument("--story", help="Only report the story group with this id")
    parser.add_argument("--max-axes", type=int, default=4, help="Maximum axes per blueprint")
    parser.add_argument("--max-cases", type=int, default=48, help="Maximum cases per blueprint")
    parser.add_argument("--out", help="Optional output path for cases (csv or jsonl)")
    parser.add_argument("--format", choices={"csv", "jsonl"}, help="Output format override")
    parser.add_argument("--limit", type=int, help="Maximum cases to print per story")
    parser.add_argument(
        "--encode",
        action="append",
        default=None,
        metavar="AXIS=VALUE",
        help="Print the perm token for a selection against --story (may be repeated)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = BlueprintSettings(max_axes=args.max_axes, max_cases=args.max_cases)
    except ValueError as exc:
        raise BPError(Err.INVALID_CONFIG, ctx={"error": str(exc)}, cause=exc)

    catalog = load_catalog(args.catalog)
    groups = BlueprintEngine(catalog.registry, settings=settings).process_stories(catalog.groups)
    blueprints = _select(groups, args.story)

    if args.encode:
        if args.story is None:
            raise BPError(Err.INVALID_CONFIG, ctx={"error": "--encode requires --story"})
        token = _encode(blueprints[0], args.encode)
        print(token)
        return 0 if token else 1

    if args.out:
        out_path = Path(args.out)
        fmt = args.format or out_path.suffix.lstrip(".") or "csv"
        _write_cases(blueprints, out_path, fmt)
        return 0

    for blueprint in blueprints:
        _print_blueprint(blueprint, args.limit)
    return 0


def _select(groups: List[StoryGroup], story_id: str | None) -> List[Blueprint]:
    blueprints = [group.blueprint for group in groups]
    if story_id is None:
        return blueprints
    matches = [bp for bp in blueprints if bp.story_id == story_id]
    if not matches:
        raise BPError(
            Err.UNKNOWN_STORY,
            ctx={"story": story_id, "known": [bp.story_id for bp in blueprints]},
        )
    return matches


def _encode(blueprint: Blueprint, pairs: List[str]) -> str:
    raw = {}
    for pair in pairs:
        if "=" not in pair:
            raise BPError(Err.INVALID_CONFIG, ctx={"error": "--encode must be AXIS=VALUE", "value": pair})
        axis, value = pair.split("=", 1)
        raw[axis] = value
    return encode_selection(normalize_selection(blueprint, raw))


def _print_blueprint(blueprint: Blueprint, limit: int | None) -> None:
    budget = blueprint.budget
    print(f"{blueprint.story_id}: {len(blueprint.axes)} axes, {len(blueprint.cases)} cases (estimated {budget.estimated_cases})")
    for axis in blueprint.axes:
        values = ", ".join(f"{value.label} ({value.confidence:.2f})" for value in axis.values)
        print(f"  {axis.label} [{axis.kind}]: {values}")
    for notice in (*budget.dropped, *blueprint.warnings):
        print(f"  ! {notice}")
    cases = blueprint.cases
    shown = cases[: limit or len(cases)]
    for case in shown:
        print(f"  - {case.label} ({case.confidence:.2f})")
    if len(shown) < len(cases):
        print(f"  ... truncated {len(cases) - len(shown)} cases")


def _write_cases(blueprints: List[Blueprint], out: Path, fmt: str) -> None:
    if fmt == "jsonl":
        with out.open("w", encoding="utf-8") as fh:
            for blueprint in blueprints:
                for case in blueprint.cases:
                    fh.write(json.dumps({"storyId": blueprint.story_id, **case.to_dict()}, default=str) + "\n")
        return

    if fmt == "csv":
        catalog_cases_frame(blueprints).to_csv(out, index=False)
        return

    raise ValueError(f"Unsupported format: {fmt}")


def entrypoint() -> None:  # pragma: no cover - console entry
    try:
        raise SystemExit(main())
    except BPError as exc:  # pragma: no cover - console behavior
        raise SystemExit(f"error: {exc}")
