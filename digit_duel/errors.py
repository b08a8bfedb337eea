"""
Errors raised by the solver and match engine.

InvalidConfiguration subclasses ValueError so the API's existing
"ValueError -> 400" handling rejects a bad setup before a match starts.
"""


class InvalidConfiguration(ValueError):
    """Digit count / duplicate policy / difficulty combination that cannot be played."""
