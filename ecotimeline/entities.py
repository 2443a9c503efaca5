# Centralized reference tables used by the projection engine and the map
from types import MappingProxyType

from ecotimeline.models import ResourceType, SeedParameters

# Approximate oil figures (reserves in billion barrels, consumption in billion barrels/year)
_OIL_SEEDS = {
    'USA': (68.8, 0.8, 0.01),
    'CHN': (26.0, 0.7, 0.04),
    'RUS': (107.8, 0.15, 0.005),
    'SAU': (297.5, 0.15, 0.02),
    'IND': (4.5, 0.23, 0.06),
    'CAN': (170.3, 0.1, 0.01),
    'BRA': (12.7, 0.11, 0.02),
    'VEN': (303.8, 0.05, -0.01),  # high reserves, low consumption
    'IRN': (157.8, 0.08, 0.01),
    'IRQ': (145.0, 0.04, 0.02),
    'KWT': (101.5, 0.03, 0.01),
    'ARE': (97.8, 0.04, 0.02),
    'NGA': (37.0, 0.02, 0.03),
    'GBR': (2.5, 0.06, -0.02),  # declining producer
    'DEU': (0.2, 0.09, -0.01),
    'JPN': (0.0, 0.16, -0.01),  # pure importer
}

SEED_TABLE = MappingProxyType({
    iso: SeedParameters(baseline_reserves=reserves, baseline_consumption=consumption, annual_growth_rate=growth)
    for iso, (reserves, consumption, growth) in _OIL_SEEDS.items()
})

COUNTRY_NAMES = MappingProxyType({
    'USA': 'United States',
    'CHN': 'China',
    'RUS': 'Russia',
    'SAU': 'Saudi Arabia',
    'IND': 'India',
    'CAN': 'Canada',
    'BRA': 'Brazil',
    'VEN': 'Venezuela',
    'IRN': 'Iran',
    'IRQ': 'Iraq',
    'KWT': 'Kuwait',
    'ARE': 'United Arab Emirates',
    'NGA': 'Nigeria',
    'GBR': 'United Kingdom',
    'DEU': 'Germany',
    'JPN': 'Japan',
})

# (latitude, longitude) marker positions for the map
COUNTRY_CENTROIDS = MappingProxyType({
    'USA': (39.8, -98.6),
    'CHN': (35.0, 104.2),
    'RUS': (61.5, 105.3),
    'SAU': (23.9, 45.1),
    'IND': (21.1, 78.0),
    'CAN': (56.1, -106.3),
    'BRA': (-14.2, -51.9),
    'VEN': (6.4, -66.6),
    'IRN': (32.4, 53.7),
    'IRQ': (33.2, 43.7),
    'KWT': (29.3, 47.5),
    'ARE': (23.4, 53.8),
    'NGA': (9.1, 8.7),
    'GBR': (54.0, -2.0),
    'DEU': (51.2, 10.5),
    'JPN': (36.2, 138.3),
})

# (reserves multiplier, consumption multiplier) relative to oil
RESOURCE_SCALING = MappingProxyType({
    ResourceType.OIL: (1, 1),
    ResourceType.COAL: (15, 5),  # coal is abundant in tonnage
    ResourceType.GAS: (3, 2),
})

UNITS = MappingProxyType({
    ResourceType.OIL: 'Billion Barrels',
    ResourceType.COAL: 'Million Tonnes',
    ResourceType.GAS: 'Trillion Cubic Meters',
})


def country_name(entity_id):
    return COUNTRY_NAMES.get(entity_id, entity_id)
