"""EcoTimeline: simulated resource depletion timelines."""
