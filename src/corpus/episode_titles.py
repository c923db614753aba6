"""
Episode titles scraped from the Wikipedia episode list.

Downloads the list page, reads the overall episode number and title of
every episode row, and left-joins the titles onto the stardate table.
"""

import re
import json
import time
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

import pandas as pd
import requests
from bs4 import BeautifulSoup

from .config import WIKI_EPISODE_LIST_URL
from .exceptions import EpisodeTitleFetchError

logger = logging.getLogger(__name__)

JOINED_COLUMNS = ['episode', 'season', 'episode_title', 'stardate', 'stardate_decimal']

session = requests.Session()
session.headers.update({
    "User-Agent": "StardateCorpusAnalysis/1.0 (Academic Research Project)",
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9",
})


def fetch_episode_list_html(url: str = WIKI_EPISODE_LIST_URL,
                            timeout: float = 30.0,
                            retries: int = 3,
                            delay: float = 2.0) -> str:
    """
    Download the episode list page, retrying on request errors.

    Raises:
        EpisodeTitleFetchError: if every attempt fails
    """
    for attempt in range(retries):
        try:
            resp = session.get(url, timeout=timeout)
            resp.raise_for_status()
            return resp.text
        except requests.RequestException as e:
            logger.warning(f"Request failed (attempt {attempt + 1}/{retries}): {url} - {e}")
            if attempt < retries - 1:
                time.sleep(delay * (attempt + 1))

    raise EpisodeTitleFetchError(f"Could not fetch {url}")


def clean_title(text: str) -> str:
    """
    Normalize a title cell.

    Handles cases like:
    - '"Encounter at Farpoint"' -> 'Encounter at Farpoint'
    - '"The Best of Both Worlds"[12]' -> 'The Best of Both Worlds'
    """
    title = re.sub(r'\[[^\]]*\]', '', text)
    title = ' '.join(title.split())
    return title.strip('"“” ')


def parse_episode_number(text: str) -> Optional[int]:
    """Read the first integer of an episode number cell."""
    match = re.search(r'\d+', text)
    return int(match.group()) if match else None


def parse_episode_titles(html: str) -> Dict[int, str]:
    """
    Parse episode numbers and titles from the episode list HTML.

    Each episode row is a ``tr.vevent`` whose header cell holds the overall
    episode number and whose ``td.summary`` cell holds the quoted title.
    The first row seen for an episode number wins.

    Returns:
        Dictionary mapping episode number to title
    """
    soup = BeautifulSoup(html, "lxml")
    titles: Dict[int, str] = {}

    for row in soup.select('tr.vevent'):
        number_cell = row.select_one('th')
        title_cell = row.select_one('td.summary')
        if number_cell is None or title_cell is None:
            continue

        episode = parse_episode_number(number_cell.get_text(" ", strip=True))
        title = clean_title(title_cell.get_text(" ", strip=True))
        if episode is None or not title:
            continue

        if episode not in titles:
            titles[episode] = title

    logger.info(f"Parsed {len(titles)} episode titles")
    return titles


def fetch_episode_titles(url: str = WIKI_EPISODE_LIST_URL,
                         timeout: float = 30.0,
                         retries: int = 3,
                         delay: float = 2.0) -> Dict[int, str]:
    """Download and parse the episode list page."""
    logger.info(f"Fetching episode titles from {url}")
    html = fetch_episode_list_html(url, timeout=timeout, retries=retries, delay=delay)
    return parse_episode_titles(html)


def load_episode_titles(path: Path) -> Dict[int, str]:
    """Load cached episode titles; JSON keys are episode numbers."""
    path = Path(path)
    if not path.exists():
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return {int(episode): title for episode, title in data.items()}


def save_episode_titles(titles: Mapping[int, str], path: Path) -> None:
    """Save episode titles to a JSON cache."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({str(k): v for k, v in sorted(titles.items())}, f, indent=2, ensure_ascii=False)


def join_episode_titles(frame: pd.DataFrame, titles: Mapping[int, str]) -> pd.DataFrame:
    """
    Left-join episode titles onto a stardate table.

    Every row is kept; rows whose episode has no title get a missing
    ``episode_title``.
    """
    joined = frame.copy()
    joined['episode_title'] = joined['episode'].map(dict(titles)).astype('object')

    unmatched = sorted(set(joined.loc[joined['episode_title'].isna(), 'episode']))
    if unmatched:
        logger.warning(f"No title found for {len(unmatched)} episodes: {unmatched}")

    return joined[JOINED_COLUMNS]
