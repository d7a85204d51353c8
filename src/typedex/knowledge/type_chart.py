from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple

from typedex.errors import UnknownTypeError

TYPE_LIST: Tuple[str, ...] = (
    "normal",
    "fire",
    "water",
    "electric",
    "grass",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dragon",
    "dark",
    "steel",
    "fairy",
)

GERMAN_TYPE_NAMES: Dict[str, str] = {
    "normal": "Normal",
    "fire": "Feuer",
    "water": "Wasser",
    "electric": "Elektro",
    "grass": "Pflanze",
    "ice": "Eis",
    "fighting": "Kampf",
    "poison": "Gift",
    "ground": "Boden",
    "flying": "Flug",
    "psychic": "Psycho",
    "bug": "Käfer",
    "rock": "Gestein",
    "ghost": "Geist",
    "dragon": "Drache",
    "dark": "Unlicht",
    "steel": "Stahl",
    "fairy": "Fee",
}

# defending type -> (weak to, resistant to, immune to)
DEFENSIVE_CHART: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]] = {
    "normal": (("fighting",), (), ("ghost",)),
    "fire": (
        ("water", "ground", "rock"),
        ("fire", "grass", "ice", "bug", "steel", "fairy"),
        (),
    ),
    "water": (("electric", "grass"), ("fire", "water", "ice", "steel"), ()),
    "electric": (("ground",), ("electric", "flying", "steel"), ()),
    "grass": (
        ("fire", "ice", "poison", "flying", "bug"),
        ("water", "electric", "grass", "ground"),
        (),
    ),
    "ice": (("fire", "fighting", "rock", "steel"), ("ice",), ()),
    "fighting": (("flying", "psychic", "fairy"), ("bug", "rock", "dark"), ()),
    "poison": (("ground", "psychic"), ("grass", "fighting", "poison", "bug", "fairy"), ()),
    "ground": (("water", "grass", "ice"), ("poison", "rock"), ("electric",)),
    "flying": (("electric", "ice", "rock"), ("grass", "fighting", "bug"), ("ground",)),
    "psychic": (("bug", "ghost", "dark"), ("fighting", "psychic"), ()),
    "bug": (("fire", "flying", "rock"), ("grass", "fighting", "ground"), ()),
    "rock": (
        ("water", "grass", "fighting", "ground", "steel"),
        ("normal", "fire", "poison", "flying"),
        (),
    ),
    "ghost": (("ghost", "dark"), ("poison", "bug"), ("normal", "fighting")),
    "dragon": (("ice", "dragon", "fairy"), ("fire", "water", "electric", "grass"), ()),
    "dark": (("fighting", "bug", "fairy"), ("ghost", "dark"), ("psychic",)),
    "steel": (
        ("fire", "fighting", "ground"),
        ("normal", "grass", "ice", "flying", "psychic", "bug", "rock", "dragon", "steel", "fairy"),
        ("poison",),
    ),
    "fairy": (("poison", "steel"), ("fighting", "bug", "dark"), ("dragon",)),
}


@dataclass(frozen=True)
class TypeRelations:
    """Defensive and offensive relations of one elemental type."""

    name: str
    weak_to: FrozenSet[str] = frozenset()
    resistant_to: FrozenSet[str] = frozenset()
    immune_to: FrozenSet[str] = frozenset()
    super_effective_against: FrozenSet[str] = frozenset()
    not_very_effective_against: FrozenSet[str] = frozenset()
    no_effect_against: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        for label, buckets in (
            ("defensive", (self.weak_to, self.resistant_to, self.immune_to)),
            (
                "offensive",
                (
                    self.super_effective_against,
                    self.not_very_effective_against,
                    self.no_effect_against,
                ),
            ),
        ):
            a, b, c = buckets
            if a & b or a & c or b & c:
                raise ValueError(f"{self.name}: overlapping {label} relations")

    def defensive_factor(self, attacking: str) -> float:
        if attacking in self.immune_to:
            return 0.0
        if attacking in self.weak_to:
            return 2.0
        if attacking in self.resistant_to:
            return 0.5
        return 1.0


def is_type(name: str) -> bool:
    return name in GERMAN_TYPE_NAMES


def normalize_type(name: str) -> str:
    key = (name or "").strip().lower()
    if not is_type(key):
        raise UnknownTypeError(name)
    return key


def type_label(name: str) -> str:
    return GERMAN_TYPE_NAMES.get(name, name)


def _known(names: Iterable[object]) -> FrozenSet[str]:
    # API payloads list {"name": ..., "url": ...} entries; cached ones plain names
    out = set()
    for entry in names or ():
        name = entry.get("name") if isinstance(entry, Mapping) else entry
        if isinstance(name, str) and is_type(name):
            out.add(name)
    return frozenset(out)


def relations_from_api(name: str, damage_relations: Mapping[str, object]) -> TypeRelations:
    """Build TypeRelations from a PokeAPI `damage_relations` object."""
    rel = damage_relations or {}
    return TypeRelations(
        name=name,
        weak_to=_known(rel.get("double_damage_from", [])),
        resistant_to=_known(rel.get("half_damage_from", [])),
        immune_to=_known(rel.get("no_damage_from", [])),
        super_effective_against=_known(rel.get("double_damage_to", [])),
        not_very_effective_against=_known(rel.get("half_damage_to", [])),
        no_effect_against=_known(rel.get("no_damage_to", [])),
    )


def invert_chart(defensive: Mapping[str, Tuple[Iterable[str], Iterable[str], Iterable[str]]]) -> Dict[str, TypeRelations]:
    """Complete a defensive-only chart with the offensive side derived by inversion.

    B weak to A means A is super effective against B, and likewise for the
    0.5x and 0x buckets.
    """
    strong: Dict[str, set] = {t: set() for t in TYPE_LIST}
    weak: Dict[str, set] = {t: set() for t in TYPE_LIST}
    none: Dict[str, set] = {t: set() for t in TYPE_LIST}
    for defender, (weak_to, resistant_to, immune_to) in defensive.items():
        for attacker in weak_to:
            strong[attacker].add(defender)
        for attacker in resistant_to:
            weak[attacker].add(defender)
        for attacker in immune_to:
            none[attacker].add(defender)

    chart: Dict[str, TypeRelations] = {}
    for name in TYPE_LIST:
        weak_to, resistant_to, immune_to = defensive.get(name, ((), (), ()))
        chart[name] = TypeRelations(
            name=name,
            weak_to=frozenset(weak_to),
            resistant_to=frozenset(resistant_to),
            immune_to=frozenset(immune_to),
            super_effective_against=frozenset(strong[name]),
            not_very_effective_against=frozenset(weak[name]),
            no_effect_against=frozenset(none[name]),
        )
    return chart


def symmetry_violations(chart: Mapping[str, TypeRelations]) -> list[Tuple[str, str, str]]:
    """List (attacker, defender, bucket) pairs where the two directions disagree."""
    problems = []
    pairs = (
        ("weak_to", "super_effective_against"),
        ("resistant_to", "not_very_effective_against"),
        ("immune_to", "no_effect_against"),
    )
    for defender in TYPE_LIST:
        for attacker in TYPE_LIST:
            d = chart.get(defender)
            a = chart.get(attacker)
            if d is None or a is None:
                continue
            for defensive, offensive in pairs:
                if (attacker in getattr(d, defensive)) != (defender in getattr(a, offensive)):
                    problems.append((attacker, defender, defensive))
    return problems


STATIC_CHART: Dict[str, TypeRelations] = invert_chart(DEFENSIVE_CHART)
