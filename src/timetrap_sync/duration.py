"""Convert seconds to Jira duration notation"""


def format_duration(total_seconds: int) -> str:
    """
    Format seconds as "1h 30m"

    Zero terms are omitted, leftover seconds are dropped, and anything under
    a minute becomes "1m" since Jira rejects empty durations.
    """
    total_seconds = max(int(total_seconds), 0)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    return " ".join(parts) or "1m"
