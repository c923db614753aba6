"""
Episode to season partition.

The corpus covers 176 episodes split into seven contiguous seasons. The
partition is kept as an explicit table so coverage of the full episode
range can be checked directly.
"""

from typing import List, Tuple

from .exceptions import CorpusContractError

# (first episode, last episode, season), inclusive bounds in broadcast order
SEASON_PARTITION: List[Tuple[int, int, int]] = [
    (1, 25, 1),
    (26, 47, 2),
    (48, 73, 3),
    (74, 99, 4),
    (100, 125, 5),
    (126, 151, 6),
    (152, 176, 7),
]

FIRST_EPISODE = SEASON_PARTITION[0][0]
LAST_EPISODE = SEASON_PARTITION[-1][1]
SEASONS = [season for _, _, season in SEASON_PARTITION]


def validate_partition(partition: List[Tuple[int, int, int]] = SEASON_PARTITION) -> None:
    """
    Check that a partition is contiguous, ordered and non-empty per season.

    Raises:
        CorpusContractError: if a range is empty or leaves a gap or overlap
    """
    if not partition:
        raise CorpusContractError("Season partition is empty")

    expected_start = partition[0][0]
    for first, last, season in partition:
        if first != expected_start:
            raise CorpusContractError(
                f"Season {season} starts at episode {first}, expected {expected_start}"
            )
        if last < first:
            raise CorpusContractError(f"Season {season} has an empty episode range")
        expected_start = last + 1


def season_for_episode(episode: int) -> int:
    """
    Get the season an episode belongs to.

    Args:
        episode: Episode number in broadcast order (1-176)

    Returns:
        Season number (1-7)

    Raises:
        CorpusContractError: if the episode is outside the partition
    """
    if isinstance(episode, bool):
        raise CorpusContractError(f"Episode number must be an integer, got {episode!r}")
    if not isinstance(episode, int):
        try:
            as_int = int(episode)
        except (TypeError, ValueError):
            raise CorpusContractError(f"Episode number must be an integer, got {episode!r}")
        if as_int != episode:
            raise CorpusContractError(f"Episode number must be an integer, got {episode!r}")
        episode = as_int

    for first, last, season in SEASON_PARTITION:
        if first <= episode <= last:
            return season

    raise CorpusContractError(
        f"Episode {episode} is outside the corpus range {FIRST_EPISODE}-{LAST_EPISODE}"
    )


def episodes_in_season(season: int) -> range:
    """Get the episode numbers of a season."""
    for first, last, candidate in SEASON_PARTITION:
        if candidate == season:
            return range(first, last + 1)
    raise CorpusContractError(f"Unknown season: {season}")
