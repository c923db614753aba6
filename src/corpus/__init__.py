"""
Stardate corpus pipeline.

Loads episode scripts, extracts stardate tokens, assigns seasons and joins
episode titles.
"""

from .exceptions import CorpusContractError, EpisodeTitleFetchError
from .models import RawScript, StardateRecord
from .seasons import SEASON_PARTITION, season_for_episode
from .extraction import StardateExtractor, extract_stardates

__all__ = [
    'CorpusContractError',
    'EpisodeTitleFetchError',
    'RawScript',
    'StardateRecord',
    'SEASON_PARTITION',
    'season_for_episode',
    'StardateExtractor',
    'extract_stardates',
]
