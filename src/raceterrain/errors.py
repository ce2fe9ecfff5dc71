"""
Errors - Failure types raised during world generation.

Out-of-bounds queries are not errors: they return None.
"""


class ConfigurationError(ValueError):
    """Invalid generation parameters (grid size, scale, track settings).

    Raised once at construction time. Generation is deterministic, so a
    failure here is a configuration defect and is never retried.
    """
