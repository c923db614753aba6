"""
Shared fixtures for the stardate corpus tests.
"""

import matplotlib
matplotlib.use("Agg")

import pytest

from corpus.models import RawScript


def make_corpus(stardate_lines=None, episode_count=176):
    """Build a corpus of RawScripts; ``stardate_lines`` maps episode -> extra lines."""
    stardate_lines = stardate_lines or {}
    return [
        RawScript(
            episode=episode,
            lines=("PICARD: Make it so.",) + tuple(stardate_lines.get(episode, ())),
        )
        for episode in range(1, episode_count + 1)
    ]


@pytest.fixture
def corpus():
    """Full-size corpus with stardates in a handful of episodes."""
    return make_corpus({
        1: ["Captain's log, stardate 41153.7. Our destination is Deneb Four."],
        2: ["Captain's log, stardate 41209.2.", "Captain's log, supplemental, stardate 41209.5"],
        30: ["First officer's log, stardate 42073.1."],
        74: ["Captain's log, stardate 41148.. The ship is at rest."],
        100: ["Captain's log, stardate 44001.4."],
        176: ["Captain's log, stardate 47988.1."],
    })


@pytest.fixture
def titles():
    """Episode titles for part of the corpus."""
    return {
        1: "Encounter at Farpoint",
        2: "The Naked Now",
        30: "Elementary, Dear Data",
        176: "All Good Things...",
    }


@pytest.fixture
def script_dir(tmp_path):
    """Directory of three numbered script files."""
    directory = tmp_path / "scripts"
    directory.mkdir()
    (directory / "1.txt").write_text("Captain's log, stardate 41153.7.\nPICARD: Engage.\n", encoding="utf-8")
    (directory / "2.txt").write_text("No stardate here.\n", encoding="utf-8")
    (directory / "10.txt").write_text("Captain's log, stardate 41209.2\r\n", encoding="utf-8")
    return directory
