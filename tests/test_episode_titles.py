"""
Tests for episode title scraping and the title join.
"""

import pandas as pd
import pytest
import requests

from corpus import episode_titles
from corpus.episode_titles import (
    JOINED_COLUMNS,
    clean_title,
    fetch_episode_list_html,
    fetch_episode_titles,
    join_episode_titles,
    load_episode_titles,
    parse_episode_titles,
    save_episode_titles,
)
from corpus.exceptions import EpisodeTitleFetchError
from corpus.extraction import extract_stardates
from corpus.models import RawScript

EPISODE_LIST_HTML = """
<html><body>
<table class="wikitable plainrowheaders wikiepisodetable">
  <tr><th>No. overall</th><th>No. in season</th><th>Title</th></tr>
  <tr class="vevent">
    <th scope="row">1</th><td>1</td>
    <td class="summary">"Encounter at Farpoint"<sup>[a]</sup></td>
  </tr>
  <tr class="vevent">
    <th scope="row">2</th><td>2</td>
    <td class="summary">"The Naked Now"[12]</td>
  </tr>
  <tr class="vevent">
    <th scope="row">TBA</th><td>3</td>
    <td class="summary">"Unnumbered"</td>
  </tr>
  <tr class="vevent">
    <td>no header cell</td>
  </tr>
</table>
<table class="wikitable">
  <tr class="vevent">
    <th scope="row">1</th>
    <td class="summary">"Star Trek Generations"</td>
  </tr>
</table>
</body></html>
"""


class FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status = status

    def raise_for_status(self):
        if self.status != 200:
            raise requests.HTTPError(f"{self.status} error")


class TestParsing:
    """Test HTML parsing of the episode list."""

    def test_clean_title(self):
        assert clean_title('"Encounter at Farpoint"') == "Encounter at Farpoint"
        assert clean_title('"The Best of Both Worlds"[12]') == "The Best of Both Worlds"
        assert clean_title('  "Data\'s  Day" ') == "Data's Day"

    def test_parse_episode_titles(self):
        titles = parse_episode_titles(EPISODE_LIST_HTML)
        assert titles == {1: "Encounter at Farpoint", 2: "The Naked Now"}

    def test_parse_empty_page(self):
        assert parse_episode_titles("<html></html>") == {}


class TestFetching:
    """Test downloading with retries."""

    def test_fetch_success(self, monkeypatch):
        monkeypatch.setattr(episode_titles.session, "get",
                            lambda url, timeout: FakeResponse(EPISODE_LIST_HTML))
        titles = fetch_episode_titles("https://example.org/list", delay=0)
        assert titles[2] == "The Naked Now"

    def test_fetch_retries_then_succeeds(self, monkeypatch):
        responses = [FakeResponse("", status=503), FakeResponse("<html>ok</html>")]
        monkeypatch.setattr(episode_titles.session, "get", lambda url, timeout: responses.pop(0))
        monkeypatch.setattr(episode_titles.time, "sleep", lambda seconds: None)

        assert fetch_episode_list_html("https://example.org/list", retries=2) == "<html>ok</html>"

    def test_fetch_gives_up(self, monkeypatch):
        calls = []

        def failing_get(url, timeout):
            calls.append(url)
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(episode_titles.session, "get", failing_get)
        monkeypatch.setattr(episode_titles.time, "sleep", lambda seconds: None)

        with pytest.raises(EpisodeTitleFetchError):
            fetch_episode_list_html("https://example.org/list", retries=3)
        assert len(calls) == 3


class TestTitleCache:
    """Test the JSON title cache."""

    def test_round_trip_keeps_integer_keys(self, tmp_path, titles):
        path = tmp_path / "cache" / "titles.json"
        save_episode_titles(titles, path)
        assert load_episode_titles(path) == titles

    def test_missing_cache_is_empty(self, tmp_path):
        assert load_episode_titles(tmp_path / "none.json") == {}


class TestTitleJoin:
    """Test the left join of titles onto stardates."""

    def test_join_keeps_every_row(self, corpus, titles):
        frame = extract_stardates(corpus)
        joined = join_episode_titles(frame, titles)

        assert list(joined.columns) == JOINED_COLUMNS
        assert len(joined) == len(frame)
        assert joined['episode'].tolist() == frame['episode'].tolist()

    def test_missing_titles_are_absent(self, corpus, titles):
        joined = join_episode_titles(extract_stardates(corpus), titles)
        by_episode = joined.drop_duplicates('episode').set_index('episode')['episode_title']

        assert by_episode[1] == "Encounter at Farpoint"
        assert by_episode[176] == "All Good Things..."
        assert pd.isna(by_episode[100])

    def test_join_with_no_titles(self):
        frame = extract_stardates([RawScript(1, ["stardate 40164.7"])], expected_episode_count=None)
        joined = join_episode_titles(frame, {})
        assert len(joined) == 1
        assert joined['episode_title'].isna().all()

    def test_join_does_not_modify_input(self, corpus, titles):
        frame = extract_stardates(corpus)
        join_episode_titles(frame, titles)
        assert 'episode_title' not in frame.columns
