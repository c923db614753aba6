"""
Exceptions raised by the stardate corpus pipeline.
"""


class CorpusContractError(ValueError):
    """
    Raised when the input corpus breaks its fixed shape.

    Covers a script count that differs from the expected episode count and
    episode numbers outside the season partition.
    """


class EpisodeTitleFetchError(Exception):
    """Raised when the episode list page cannot be downloaded."""
