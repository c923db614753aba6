"""
Stardate extraction from episode scripts.

Scans raw script text for stardate tokens and tidies them into one row per
token: match extraction, flattening to rows, prefix stripping, season
assignment, sentinel rejection and numeric parsing, decimal-digit
derivation, and dropping of unparseable rows.
"""

import re
import math
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import EXPECTED_EPISODE_COUNT
from .exceptions import CorpusContractError
from .models import RawScript, StardateRecord
from .seasons import season_for_episode

logger = logging.getLogger(__name__)

# The word "date", one whitespace character, then seven digits or dots.
# Numbers without the "date" prefix are not matched.
STARDATE_PATTERN = re.compile(r'date\s[0-9.]{7}')

MATCH_PREFIX = 'date '

# Double-decimal artifacts from punctuation following a stardate
SENTINEL_STARDATES: FrozenSet[str] = frozenset({'41148..', '40052..', '37650..'})

DECIMAL_DIGIT_POSITION = 6

OUTPUT_COLUMNS = ['episode', 'season', 'stardate', 'stardate_decimal']


@dataclass
class ExtractionStats:
    """Counts collected during one extraction run."""
    episodes: int = 0
    episodes_with_matches: int = 0
    matches: int = 0
    sentinel_rejections: int = 0
    parse_failures: int = 0
    records: int = 0


def find_stardate_matches(lines: Iterable[str]) -> List[str]:
    """Collect every stardate match from a sequence of lines, in order."""
    matches = []
    for line in lines:
        matches.extend(STARDATE_PATTERN.findall(line))
    return matches


def flatten_matches(matches_by_episode: Dict[int, List[str]]) -> pd.DataFrame:
    """
    Expand per-episode match lists into one row per match.

    Returns:
        DataFrame with columns ``episode`` and ``match``
    """
    rows = [
        (episode, match)
        for episode, matches in matches_by_episode.items()
        for match in matches
    ]
    frame = pd.DataFrame(rows, columns=['episode', 'match'])
    return frame.astype({'episode': 'int64', 'match': 'object'})


def strip_prefix(match: str) -> str:
    """Remove the literal ``"date "`` prefix from a match."""
    if match.startswith(MATCH_PREFIX):
        return match[len(MATCH_PREFIX):]
    return match


def parse_stardate(text: str) -> float:
    """
    Parse a cleaned stardate string.

    Sentinel strings and anything that is not a number give NaN.
    """
    if text in SENTINEL_STARDATES:
        return np.nan
    try:
        return float(text)
    except (TypeError, ValueError):
        return np.nan


def format_stardate(value: float) -> str:
    """String form of a stardate: up to 15 significant digits, no trailing ``.0``."""
    return format(value, '.15g')


def stardate_decimal_digit(value: float) -> int:
    """
    Get the digit after the decimal point of a stardate.

    Reads the 7th character of the stardate's string form. Falls back to 0
    when the string is too short or that character is not a digit.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return 0

    text = format_stardate(value)
    if len(text) > DECIMAL_DIGIT_POSITION and text[DECIMAL_DIGIT_POSITION].isdigit():
        return int(text[DECIMAL_DIGIT_POSITION])
    return 0


class StardateExtractor:
    """Turn raw episode scripts into cleaned stardate rows."""

    def __init__(self, expected_episode_count: Optional[int] = EXPECTED_EPISODE_COUNT):
        """
        Initialize the extractor.

        Args:
            expected_episode_count: Number of scripts the corpus must contain,
                or None to accept any number of scripts
        """
        self.expected_episode_count = expected_episode_count
        self.stats = ExtractionStats()

    def _validate_corpus(self, scripts: Sequence[RawScript]):
        """Check the structural contract of the input corpus."""
        if self.expected_episode_count is not None and len(scripts) != self.expected_episode_count:
            raise CorpusContractError(
                f"Expected {self.expected_episode_count} scripts, got {len(scripts)}"
            )

        seen = set()
        for script in scripts:
            if script.episode in seen:
                raise CorpusContractError(f"Duplicate script for episode {script.episode}")
            seen.add(script.episode)
            season_for_episode(script.episode)

    def extract_matches(self, scripts: Sequence[RawScript]) -> Dict[int, List[str]]:
        """Map each episode to its stardate matches."""
        return {script.episode: find_stardate_matches(script.lines) for script in scripts}

    def extract(self, scripts: Sequence[RawScript]) -> pd.DataFrame:
        """
        Extract cleaned stardate rows from a corpus.

        Args:
            scripts: Episode scripts, one per episode

        Returns:
            DataFrame with columns episode, season, stardate, stardate_decimal

        Raises:
            CorpusContractError: if the corpus shape or an episode number is invalid
        """
        scripts = list(scripts)
        self._validate_corpus(scripts)

        matches_by_episode = self.extract_matches(scripts)
        frame = flatten_matches(matches_by_episode)

        frame['stardate_text'] = frame['match'].map(strip_prefix)
        frame['season'] = frame['episode'].map(season_for_episode)

        sentinel_mask = frame['stardate_text'].isin(SENTINEL_STARDATES)
        frame['stardate'] = frame['stardate_text'].map(parse_stardate).astype('float64')
        frame['stardate_decimal'] = frame['stardate'].map(stardate_decimal_digit)

        missing_mask = frame['stardate'].isna()
        cleaned = frame.loc[~missing_mask, OUTPUT_COLUMNS].reset_index(drop=True)
        cleaned = cleaned.astype({
            'episode': 'int64',
            'season': 'int64',
            'stardate': 'float64',
            'stardate_decimal': 'int64',
        })

        self.stats = ExtractionStats(
            episodes=len(scripts),
            episodes_with_matches=sum(1 for matches in matches_by_episode.values() if matches),
            matches=len(frame),
            sentinel_rejections=int(sentinel_mask.sum()),
            parse_failures=int((missing_mask & ~sentinel_mask).sum()),
            records=len(cleaned),
        )

        if self.stats.sentinel_rejections or self.stats.parse_failures:
            logger.warning(
                f"Dropped {self.stats.sentinel_rejections} sentinel and "
                f"{self.stats.parse_failures} unparseable stardate matches"
            )
        logger.info(
            f"Extracted {self.stats.records} stardates from {self.stats.matches} matches "
            f"in {self.stats.episodes_with_matches}/{self.stats.episodes} episodes"
        )

        return cleaned

    def extract_records(self, scripts: Sequence[RawScript]) -> List[StardateRecord]:
        """Extract stardates as StardateRecord objects."""
        return frame_to_records(self.extract(scripts))


def frame_to_records(frame: pd.DataFrame) -> List[StardateRecord]:
    """Convert a stardate table to StardateRecord objects."""
    return [StardateRecord.from_row(row) for row in frame.to_dict('records')]


def extract_stardates(scripts: Sequence[RawScript],
                      expected_episode_count: Optional[int] = EXPECTED_EPISODE_COUNT) -> pd.DataFrame:
    """Convenience wrapper around StardateExtractor.extract."""
    return StardateExtractor(expected_episode_count).extract(scripts)
