"""
Loading of episode script files.

Discovers the plain-text scripts of the corpus, orders them by episode and
turns each one into a read-only RawScript.
"""

import re
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from tqdm import tqdm

from .config import EXPECTED_EPISODE_COUNT
from .exceptions import CorpusContractError
from .models import RawScript

logger = logging.getLogger(__name__)


def natural_sort_key(path: Path) -> Tuple:
    """
    Sort key that orders file stems by their embedded numbers.

    Handles cases like:
    - "2.txt" before "10.txt"
    - "episode_9" before "episode_10"
    """
    parts = re.split(r'(\d+)', path.stem)
    return tuple(int(part) if part.isdigit() else part.lower() for part in parts)


def load_script(file_path: Path, episode: int, encoding: str = 'utf-8') -> RawScript:
    """
    Read a single script file.

    Args:
        file_path: Path to the script text file
        episode: Episode number assigned to the script
        encoding: Text encoding of the file

    Returns:
        RawScript holding the file's lines without line endings
    """
    with open(file_path, 'r', encoding=encoding, errors='replace') as f:
        lines = [line.rstrip('\r\n') for line in f]

    logger.debug(f"Loaded episode {episode} from {file_path}: {len(lines)} lines")

    return RawScript(episode=episode, lines=tuple(lines), source=Path(file_path))


def discover_script_files(data_directory: Path, pattern: str = '*.txt') -> List[Path]:
    """Find script files in a directory, in natural numeric order."""
    data_directory = Path(data_directory)

    if not data_directory.is_dir():
        raise FileNotFoundError(f"Script directory not found: {data_directory}")

    files = [p for p in data_directory.glob(pattern) if p.is_file()]
    return sorted(files, key=natural_sort_key)


def load_scripts_complete(data_directory: Union[str, Path],
                          pattern: str = '*.txt',
                          expected_episode_count: Optional[int] = EXPECTED_EPISODE_COUNT,
                          encoding: str = 'utf-8',
                          show_progress: bool = False) -> List[RawScript]:
    """
    Load every script of the corpus.

    Episode numbers are assigned from the 1-based position of each file in
    natural sort order.

    Args:
        data_directory: Directory containing the script files
        pattern: Glob pattern selecting script files
        expected_episode_count: Required number of scripts, or None to accept any
        encoding: Text encoding of the files
        show_progress: Display a progress bar while reading

    Returns:
        List of RawScript ordered by episode

    Raises:
        FileNotFoundError: if the directory is missing or holds no scripts
        CorpusContractError: if the script count differs from the expected count
    """
    script_files = discover_script_files(Path(data_directory), pattern)

    if not script_files:
        raise FileNotFoundError(f"No script files matching '{pattern}' found in {data_directory}")

    if expected_episode_count is not None and len(script_files) != expected_episode_count:
        raise CorpusContractError(
            f"Expected {expected_episode_count} scripts in {data_directory}, found {len(script_files)}"
        )

    logger.info(f"Loading {len(script_files)} scripts from {data_directory}")

    iterator = enumerate(script_files, start=1)
    if show_progress:
        iterator = tqdm(iterator, total=len(script_files), desc="Loading scripts")

    scripts = [load_script(path, episode, encoding) for episode, path in iterator]

    total_lines = sum(len(script) for script in scripts)
    logger.info(f"Loaded {len(scripts)} scripts, {total_lines} lines in total")

    return scripts
