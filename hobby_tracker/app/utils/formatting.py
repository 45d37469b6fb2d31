def format_minutes(minutes: int | None) -> str:
    """Render a minute count as ``"2h 5m"``, or ``"45m"`` under an hour."""
    minutes = minutes or 0
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
