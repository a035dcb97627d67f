"""Exception hierarchy for the dashboard."""


class MyIpError(Exception):
    """Base exception for all dashboard errors."""


class StatsError(MyIpError):
    """The raw interface provider could not enumerate interfaces or counters."""


class StartupError(MyIpError):
    """The initial fetch failed; there is nothing to show."""
