"""Cross-entity aggregation over a WorldSnapshot."""
from typing import List, Optional

import pandas as pd

from ecotimeline.config import END_YEAR, START_YEAR
from ecotimeline.models import EntityTimeline, GlobalStats, GlobalYearAggregate, WorldSnapshot
from ecotimeline.projection import year_point

SNAPSHOT_COLUMNS = ['id', 'name', 'year', 'consumption', 'reserves', 'is_depleted']


def snapshot_frame(snapshot: WorldSnapshot) -> pd.DataFrame:
    """Long-format frame with one row per entity per year."""
    rows = [
        {'id': timeline.id, 'name': timeline.name, **point.model_dump()}
        for timeline in snapshot.values()
        for point in timeline.history.values()
    ]
    return pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)


def compute_global_stats(snapshot: WorldSnapshot, year) -> GlobalStats:
    total_reserves = 0.0
    total_consumption = 0.0
    depleted_count = 0
    for timeline in snapshot.values():
        point = year_point(timeline, year)
        if point is None:  # no data for this year contributes nothing
            continue
        total_reserves += point.reserves
        total_consumption += point.consumption
        if point.is_depleted:
            depleted_count += 1
    return GlobalStats(total_reserves=total_reserves, total_consumption=total_consumption,
                       depleted_count=depleted_count)


def compute_global_series(snapshot: WorldSnapshot, start_year=START_YEAR, end_year=END_YEAR) -> List[GlobalYearAggregate]:
    """Summed reserves and consumption for every year in the range, ascending and gap free."""
    df = snapshot_frame(snapshot)
    years = pd.Index(range(start_year, end_year + 1), name='year')
    totals = (
        df.groupby('year')[['reserves', 'consumption']].sum()
        .reindex(years, fill_value=0.0)
    )
    return [
        GlobalYearAggregate(year=int(year), total_reserves=float(row.reserves),
                            total_consumption=float(row.consumption))
        for year, row in totals.iterrows()
    ]


def global_depletion_year(series) -> Optional[int]:
    """First year whose summed reserves reach zero, read off the aggregate curve only."""
    for aggregate in series:
        if aggregate.total_reserves <= 0:
            return aggregate.year
    return None


def color_ratio(timeline: EntityTimeline, year) -> Optional[float]:
    """Share of the START_YEAR reserves left in `year`, clamped to [0, 1].

    Returns 0.0 when the START_YEAR reserves are missing or not positive, and
    None when `year` itself has no data.
    """
    point = year_point(timeline, year)
    if point is None:
        return None
    initial = year_point(timeline, START_YEAR)
    if initial is None or initial.reserves <= 0:
        return 0.0
    return min(1.0, max(0.0, point.reserves / initial.reserves))
