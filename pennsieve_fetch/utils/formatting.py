"""
Helper functions for formatting data into human-readable strings.
"""


def format_duration(seconds: float) -> str:
    """
    Formats an elapsed time for the run summary.

    Sub-minute runs keep one decimal ('4.2s'); longer ones are split into
    units with zero-padded seconds ('1h 02m 05s').
    """
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02}m {secs:02}s"
    return f"{minutes}m {secs:02}s"


def mask_secret(value: str) -> str:
    """Hides a credential, keeping only whether one was supplied."""
    return "[hidden]" if value else "[not set]"
