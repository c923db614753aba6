"""
Tests for the episode to season partition.
"""

import pytest

from corpus.exceptions import CorpusContractError
from corpus.seasons import (
    SEASON_PARTITION,
    episodes_in_season,
    season_for_episode,
    validate_partition,
)


class TestSeasonPartition:
    """Test the fixed season lookup table."""

    def test_every_episode_has_exactly_one_season(self):
        """Episodes 1-176 each fall into exactly one range."""
        for episode in range(1, 177):
            owners = [s for first, last, s in SEASON_PARTITION if first <= episode <= last]
            assert len(owners) == 1
            assert season_for_episode(episode) == owners[0]
            assert 1 <= owners[0] <= 7

    def test_partition_is_contiguous(self):
        validate_partition()
        assert SEASON_PARTITION[0][0] == 1
        assert SEASON_PARTITION[-1][1] == 176

    @pytest.mark.parametrize("episode,season", [
        (1, 1), (25, 1), (26, 2), (47, 2), (48, 3), (73, 3), (74, 4),
        (99, 4), (100, 5), (125, 5), (126, 6), (151, 6), (152, 7), (176, 7),
    ])
    def test_season_boundaries(self, episode, season):
        assert season_for_episode(episode) == season

    @pytest.mark.parametrize("episode", [0, -1, 177, 500])
    def test_out_of_range_episode_is_a_contract_error(self, episode):
        with pytest.raises(CorpusContractError, match="outside the corpus range"):
            season_for_episode(episode)

    def test_non_integer_episode_rejected(self):
        with pytest.raises(CorpusContractError, match="must be an integer"):
            season_for_episode(12.5)

    def test_bool_episode_rejected(self):
        with pytest.raises(CorpusContractError, match="must be an integer"):
            season_for_episode(True)

    def test_gap_detected(self):
        with pytest.raises(CorpusContractError, match="expected 11"):
            validate_partition([(1, 10, 1), (12, 20, 2)])

    def test_overlap_detected(self):
        with pytest.raises(CorpusContractError, match="expected 11"):
            validate_partition([(1, 10, 1), (9, 20, 2)])

    def test_episodes_in_season(self):
        assert list(episodes_in_season(2)) == list(range(26, 48))
        assert sum(len(episodes_in_season(s)) for s in range(1, 8)) == 176

    def test_unknown_season(self):
        with pytest.raises(CorpusContractError):
            episodes_in_season(8)
