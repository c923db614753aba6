"""
Tests for loading episode script files.
"""

from pathlib import Path

import pytest

from corpus.exceptions import CorpusContractError
from corpus.preprocessing import (
    discover_script_files,
    load_script,
    load_scripts_complete,
    natural_sort_key,
)


class TestScriptLoading:
    """Test discovery and reading of script files."""

    def test_natural_sort_key(self):
        names = [Path("10.txt"), Path("2.txt"), Path("1.txt")]
        assert [p.name for p in sorted(names, key=natural_sort_key)] == ["1.txt", "2.txt", "10.txt"]

    def test_natural_sort_key_with_prefix(self):
        names = [Path("episode_10.txt"), Path("episode_9.txt")]
        assert [p.name for p in sorted(names, key=natural_sort_key)] == ["episode_9.txt", "episode_10.txt"]

    def test_discover_orders_files(self, script_dir):
        files = discover_script_files(script_dir)
        assert [f.name for f in files] == ["1.txt", "2.txt", "10.txt"]

    def test_discover_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            discover_script_files(tmp_path / "missing")

    def test_load_script_strips_line_endings(self, script_dir):
        script = load_script(script_dir / "10.txt", episode=3)
        assert script.episode == 3
        assert script.lines == ("Captain's log, stardate 41209.2",)
        assert script.source == script_dir / "10.txt"

    def test_load_script_replaces_undecodable_bytes(self, tmp_path):
        path = tmp_path / "1.txt"
        path.write_bytes(b"stardate 41148.7 \xff\n")
        script = load_script(path, episode=1)
        assert script.lines[0].startswith("stardate 41148.7")

    def test_load_complete_assigns_episode_by_position(self, script_dir):
        scripts = load_scripts_complete(script_dir, expected_episode_count=3)
        assert [s.episode for s in scripts] == [1, 2, 3]
        assert scripts[2].source.name == "10.txt"

    def test_load_complete_count_mismatch(self, script_dir):
        with pytest.raises(CorpusContractError, match="Expected 176 scripts"):
            load_scripts_complete(script_dir)

    def test_load_complete_without_count_check(self, script_dir):
        scripts = load_scripts_complete(script_dir, expected_episode_count=None, show_progress=True)
        assert len(scripts) == 3

    def test_load_complete_empty_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="No script files"):
            load_scripts_complete(tmp_path, expected_episode_count=None)

    def test_scripts_are_read_only(self, script_dir):
        script = load_scripts_complete(script_dir, expected_episode_count=None)[0]
        with pytest.raises(AttributeError):
            script.lines = ()
