"""Timeline projection engine.

Builds a yearly history for every entity in a seed table: a back-cast from
START_YEAR up to the seed year, the seed year itself, and a forward projection
from PROJECTION_PIVOT_YEAR to END_YEAR in which consumption compounds at the
entity's growth rate and is subtracted from the remaining reserves.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ecotimeline.config import END_YEAR, NOISE_AMPLITUDE, PROJECTION_PIVOT_YEAR, START_YEAR
from ecotimeline.entities import RESOURCE_SCALING, SEED_TABLE, country_name
from ecotimeline.models import EntityTimeline, ResourceType, SeedParameters, WorldSnapshot, YearPoint


@dataclass(frozen=True)
class _ProjectionState:
    reserves: float
    consumption: float


def scale_seed(seed: SeedParameters, resource: ResourceType) -> SeedParameters:
    reserve_mod, consumption_mod = RESOURCE_SCALING[resource]
    return SeedParameters(
        baseline_reserves=seed.baseline_reserves * reserve_mod,
        baseline_consumption=seed.baseline_consumption * consumption_mod,
        annual_growth_rate=seed.annual_growth_rate,
    )


def _backcast(baseline_reserves, baseline_consumption, growth_rate):
    # consumption is compounded backwards and left unclamped, even when a
    # negative growth rate makes the deep past implausibly large
    for year in range(START_YEAR, PROJECTION_PIVOT_YEAR - 1):
        years_ago = PROJECTION_PIVOT_YEAR - year
        past_consumption = baseline_consumption / (1 + growth_rate) ** years_ago
        past_reserves = baseline_reserves + past_consumption * years_ago
        yield YearPoint(year=year, consumption=past_consumption, reserves=max(0.0, past_reserves), is_depleted=False)


def _step(state: _ProjectionState, growth_rate: float):
    consumption = state.consumption * (1 + growth_rate)
    remaining = state.reserves - consumption
    return _ProjectionState(max(0.0, remaining), consumption), remaining <= 0


def project_entity(entity_id, name, baseline_reserves, baseline_consumption, growth_rate) -> EntityTimeline:
    """Project one entity from already scaled baseline values and an effective growth rate.

    A growth rate of exactly -1 is the only rejected input (ValueError): the
    back-cast would divide by zero. Every other rate, including ones that make
    consumption implausible, is projected as given.
    """
    if 1 + growth_rate == 0:
        raise ValueError(f"{entity_id}: growth rate of -1 leaves nothing to back-cast from")

    history = {point.year: point for point in _backcast(baseline_reserves, baseline_consumption, growth_rate)}

    seed_year = PROJECTION_PIVOT_YEAR - 1
    history[seed_year] = YearPoint(year=seed_year, consumption=baseline_consumption,
                                   reserves=baseline_reserves, is_depleted=baseline_reserves <= 0)

    # each year starts from the previous year's stored (clamped) reserves, so a
    # depleted entity stays at zero whatever the sign of its growth rate
    state = _ProjectionState(baseline_reserves, baseline_consumption)
    first_depletion_year = None
    for year in range(PROJECTION_PIVOT_YEAR, END_YEAR + 1):
        state, is_depleted = _step(state, growth_rate)
        if is_depleted and first_depletion_year is None:
            first_depletion_year = year
        history[year] = YearPoint(year=year, consumption=state.consumption,
                                  reserves=state.reserves, is_depleted=is_depleted)

    return EntityTimeline(id=entity_id, name=name, history=history, first_depletion_year=first_depletion_year)


def generate_world_snapshot(resource, seed_table=SEED_TABLE, rng=None,
                            noise_amplitude=NOISE_AMPLITUDE) -> WorldSnapshot:
    """Generate every entity's timeline for `resource`.

    The growth rate of each entity is perturbed by a uniform draw from
    [-noise_amplitude, +noise_amplitude] taken from `rng` (a numpy Generator),
    in seed table order. Pass a seeded generator for reproducible snapshots.
    """
    resource = ResourceType(resource)
    if rng is None:
        rng = np.random.default_rng()

    timelines = {}
    for entity_id, seed in seed_table.items():
        scaled = scale_seed(seed, resource)
        noise = float(rng.uniform(-noise_amplitude, noise_amplitude))
        timelines[entity_id] = project_entity(
            entity_id,
            country_name(entity_id),
            float(scaled.baseline_reserves),
            float(scaled.baseline_consumption),
            scaled.annual_growth_rate + noise,
        )
    return WorldSnapshot(resource, timelines)


def year_point(timeline: EntityTimeline, year) -> Optional[YearPoint]:
    """The entity's point for `year`, or None when the year has no data."""
    return timeline.history.get(year)
