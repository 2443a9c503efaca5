import os

START_YEAR = 1990
PROJECTION_PIVOT_YEAR = 2024  # first projected year; the seed year is the one before
END_YEAR = 2050

NOISE_AMPLITUDE = 0.1  # growth rate noise is drawn from [-0.1, +0.1]

DEFAULT_YEAR = PROJECTION_PIVOT_YEAR
CRITICAL_RATIO = 0.2  # below this share of 1990 reserves a country is styled as critical
PLAYBACK_INTERVAL_SECONDS = 0.5

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv('ECOTIMELINE_DATA_DIR') or os.path.join(BASE_DIR, 'data')
SECRET_KEY = os.getenv('ECOTIMELINE_SECRET_KEY', 'ecotimeline-dev-secret')
DEFAULT_RESOURCE = os.getenv('ECOTIMELINE_DEFAULT_RESOURCE', 'Oil')


def noise_seed():
    """Integer seed from ECOTIMELINE_NOISE_SEED, or None for run-to-run noise."""
    raw = (os.getenv('ECOTIMELINE_NOISE_SEED') or '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"ECOTIMELINE_NOISE_SEED must be an integer, got {raw!r}")
