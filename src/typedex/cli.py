from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from typing import List, Optional, Sequence

from typedex.config import LookupConfig
from typedex.engine.effectiveness import TypeMultiplier, checked_types, combine_defensive, combine_offensive
from typedex.knowledge.type_chart import STATIC_CHART, type_label
from typedex.names.name_index import NameIndexEntry
from typedex.session import LookupOutcome, LookupSession
from typedex.utils.logger import configure_logging


def format_multiplier(value: float) -> str:
    return f"{value:g}×"


def render_list(title: str, items: Sequence[TypeMultiplier]) -> List[str]:
    lines = [f"{title}:"]
    if not items:
        lines.append("  Keine")
        return lines
    lines.extend(f"  {type_label(item.type):<10} {format_multiplier(item.multiplier)}" for item in items)
    return lines


def render_outcome(outcome: LookupOutcome) -> str:
    if outcome.error is not None:
        return f"{outcome.error.title}\n{outcome.error.detail}"
    result = outcome.result
    record = result.record
    lines = [
        f"{record.name} (#{record.canonical_id})",
        "Typen: " + " / ".join(type_label(t) for t in record.types),
    ]
    if record.sprite_url:
        lines.append(f"Bild: {record.sprite_url}")
    lines.extend(render_list("Stark gegen", result.strengths))
    lines.extend(render_list("Schwächen", result.profile.weaknesses))
    lines.extend(render_list("Resistenzen", result.profile.resistances))
    if result.profile.immunities:
        lines.extend(render_list("Immunitäten", result.profile.immunities))
    return "\n".join(lines)


def render_suggestions(entries: Sequence[NameIndexEntry]) -> str:
    if not entries:
        return "Keine Vorschläge"
    return "\n".join(f"{e.german_name} ({e.english_name})" for e in entries)


def render_types(types: Sequence[str]) -> str:
    relations = [STATIC_CHART[t] for t in checked_types(types)]
    profile = combine_defensive(relations)
    lines = ["Typen: " + " / ".join(type_label(r.name) for r in relations)]
    lines.extend(render_list("Stark gegen", combine_offensive(relations)))
    lines.extend(render_list("Schwächen", profile.weaknesses))
    lines.extend(render_list("Resistenzen", profile.resistances))
    lines.extend(render_list("Immunitäten", profile.immunities))
    return "\n".join(lines)


async def run_lookup(name: str, config: LookupConfig) -> LookupOutcome:
    async with LookupSession(config) as session:
        return await session.search(name)


async def run_suggest(text: str, config: LookupConfig) -> List[NameIndexEntry]:
    async with LookupSession(config) as session:
        return await session.suggest(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up Pokémon type matchups via PokeAPI.")
    parser.add_argument("--env-file", default=".env", help="Optional .env with TYPEDEX_* settings.")
    parser.add_argument("--log-level", default="warning", help="structlog level filter.")
    parser.add_argument("--base-url", default=None, help="PokeAPI base URL.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
    parser.add_argument("--species-limit", type=int, default=None, help="Species listed for the German name index.")
    sub = parser.add_subparsers(dest="command", required=True)

    lookup = sub.add_parser("lookup", help="Show type matchups of a Pokémon (English or German name).")
    lookup.add_argument("name", nargs="?", default="")
    lookup.add_argument("--static-types", action="store_true", help="Use the embedded type chart.")

    suggest = sub.add_parser("suggest", help="Autocomplete suggestions for a partial name.")
    suggest.add_argument("text")

    types = sub.add_parser("types", help="Matchups for one or two types from the embedded chart.")
    types.add_argument("types", nargs="+")
    return parser


def config_from_args(args: argparse.Namespace) -> LookupConfig:
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url.rstrip("/")
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    if args.species_limit is not None:
        overrides["species_limit"] = args.species_limit
    if getattr(args, "static_types", False):
        overrides["use_static_types"] = True
    config = LookupConfig.from_env(args.env_file)
    return replace(config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "types":
        try:
            print(render_types(args.types))
        except ValueError as exc:
            parser.error(str(exc))
        return 0

    config = config_from_args(args)
    if args.command == "suggest":
        print(render_suggestions(asyncio.run(run_suggest(args.text, config))))
        return 0

    outcome = asyncio.run(run_lookup(args.name, config))
    print(render_outcome(outcome))
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
