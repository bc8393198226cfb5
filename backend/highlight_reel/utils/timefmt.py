"""Time formatting helpers for log lines and display."""


def format_time(seconds: float) -> str:
    """
    Format seconds as M:SS, or H:MM:SS past the hour.
    
    Args:
        seconds: Time in seconds (fractions are truncated)
        
    Returns:
        Formatted time string
    """
    total = int(max(0.0, seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_time_to_seconds(value: str) -> float:
    """
    Parse an M:SS or H:MM:SS string into seconds.
    
    Raises:
        ValueError: If the string is not in one of those forms
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time string: {value!r}")
    
    try:
        numbers = [float(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Invalid time string: {value!r}") from exc
    
    if any(n < 0 for n in numbers):
        raise ValueError(f"Invalid time string: {value!r}")
    
    if len(numbers) == 2:
        minutes, secs = numbers
        return minutes * 60 + secs
    hours, minutes, secs = numbers
    return hours * 3600 + minutes * 60 + secs
