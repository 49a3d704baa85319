"""Exceptions raised for invalid input."""


class InputError(ValueError):
    """Out-of-range coordinate or date, or contradictory configuration."""
