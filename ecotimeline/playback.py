# Year slider playback: one year per tick, stopping at END_YEAR
from ecotimeline.config import END_YEAR, START_YEAR


def next_playback_year(year, playing):
    """Return (year, playing) after one playback tick."""
    if not playing:
        return year, False
    if year >= END_YEAR:
        return START_YEAR, False  # finished: rewind and stop
    return year + 1, True


def toggle_playback(year, playing):
    """Return (year, playing) after the play/pause button is pressed."""
    if not playing and year >= END_YEAR:
        return START_YEAR, True  # replay from the beginning
    return year, not playing
