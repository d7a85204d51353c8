from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from typedex.knowledge.type_chart import TYPE_LIST, TypeRelations, normalize_type
from typedex.knowledge.type_provider import TypeChartProvider

MAX_TYPES = 2
SUPER_EFFECTIVE_SCORE = 2


@dataclass(frozen=True)
class TypeMultiplier:
    type: str
    multiplier: float


@dataclass(frozen=True)
class EffectivenessProfile:
    weaknesses: Tuple[TypeMultiplier, ...] = field(default_factory=tuple)
    resistances: Tuple[TypeMultiplier, ...] = field(default_factory=tuple)
    immunities: Tuple[TypeMultiplier, ...] = field(default_factory=tuple)

    def multiplier_for(self, attacking: str) -> float:
        for group in (self.weaknesses, self.resistances, self.immunities):
            for entry in group:
                if entry.type == attacking:
                    return entry.multiplier
        return 1.0


def defensive_multipliers(relations: Sequence[TypeRelations]) -> Dict[str, float]:
    """Combined multiplier of every attacking type against the given defenders."""
    multipliers: Dict[str, float] = {}
    for attacking in TYPE_LIST:
        m = 1.0
        for defender in relations:
            if m == 0.0:
                break  # immunity from any defending type is final
            if attacking in defender.immune_to:
                m = 0.0
            elif attacking in defender.weak_to:
                m *= 2.0
            elif attacking in defender.resistant_to:
                m *= 0.5
        multipliers[attacking] = m
    return multipliers


def combine_defensive(relations: Sequence[TypeRelations]) -> EffectivenessProfile:
    weaknesses: List[TypeMultiplier] = []
    resistances: List[TypeMultiplier] = []
    immunities: List[TypeMultiplier] = []
    for attacking, m in defensive_multipliers(relations).items():
        if m == 0.0:
            immunities.append(TypeMultiplier(attacking, 0.0))
        elif m > 1.0:
            weaknesses.append(TypeMultiplier(attacking, m))
        elif m < 1.0:
            resistances.append(TypeMultiplier(attacking, m))
    weaknesses.sort(key=lambda e: e.multiplier, reverse=True)
    resistances.sort(key=lambda e: e.multiplier)
    return EffectivenessProfile(tuple(weaknesses), tuple(resistances), tuple(immunities))


def combine_offensive(relations: Sequence[TypeRelations]) -> List[TypeMultiplier]:
    """Coverage score per target: +2 for each attacking type super effective against it.

    Sorted by score, highest first; ties keep the order targets were first seen.
    """
    scores: Dict[str, int] = {}
    for attacker in relations:
        for target in sorted(attacker.super_effective_against, key=TYPE_LIST.index):
            scores[target] = scores.get(target, 0) + SUPER_EFFECTIVE_SCORE
    ranked = [TypeMultiplier(t, float(score)) for t, score in scores.items() if score > 0]
    ranked.sort(key=lambda e: e.multiplier, reverse=True)
    return ranked


def checked_types(types: Iterable[str]) -> List[str]:
    """Validated, de-duplicated type list of one creature (1 or 2 entries)."""
    distinct = list(dict.fromkeys(normalize_type(t) for t in types))
    if not distinct:
        raise ValueError("at least one type is required")
    if len(distinct) > MAX_TYPES:
        raise ValueError(f"at most {MAX_TYPES} types are supported, got {len(distinct)}")
    return distinct


async def defensive_profile(types: Iterable[str], provider: TypeChartProvider) -> EffectivenessProfile:
    return combine_defensive(await provider.get_many(checked_types(types)))


async def offensive_strengths(types: Iterable[str], provider: TypeChartProvider) -> List[TypeMultiplier]:
    return combine_offensive(await provider.get_many(checked_types(types)))
