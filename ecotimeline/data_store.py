from ecotimeline.aggregation import snapshot_frame


def snapshot_csv(snapshot):
    """Long-format CSV text of a snapshot, one row per country per year."""
    df = snapshot_frame(snapshot)
    df.insert(0, 'resource', snapshot.resource.value)
    return df.to_csv(index=False)
