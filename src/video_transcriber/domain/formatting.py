"""Human-readable formatting of durations and dates."""


def format_duration(seconds: int) -> str:
    """Formats a duration in seconds as HH:MM:SS."""
    seconds = max(int(seconds), 0)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_short_duration(seconds: int) -> str:
    """Formats a duration as M:SS, minutes unbounded."""
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


def format_date(date_str: str) -> str:
    """Formats YYYYMMDD as YYYY-MM-DD; any other length is returned unchanged."""
    if not date_str or len(date_str) != 8:
        return date_str
    return f"{date_str[0:4]}-{date_str[4:6]}-{date_str[6:8]}"
