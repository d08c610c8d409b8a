"""Display helpers."""


def format_elapsed_time(milliseconds: float) -> str:
    """Format a duration as ``1h 2m 3s``, ``2m 3s`` or ``3s``."""
    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
