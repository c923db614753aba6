"""
Pipeline configuration for the stardate corpus analysis.
"""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional

EXPECTED_EPISODE_COUNT = 176

WIKI_EPISODE_LIST_URL = (
    "https://en.wikipedia.org/wiki/List_of_Star_Trek:_The_Next_Generation_episodes"
)


@dataclass
class PipelineConfig:
    """Configuration for one batch run."""
    scripts_dir: Path = Path("data/scripts")
    file_pattern: str = "*.txt"
    expected_episode_count: Optional[int] = EXPECTED_EPISODE_COUNT
    encoding: str = "utf-8"

    # Episode title scraping
    wiki_url: str = WIKI_EPISODE_LIST_URL
    request_timeout: float = 30.0
    request_retries: int = 3
    request_delay: float = 2.0
    titles_cache: Path = Path("data/episode_titles.json")
    offline: bool = False

    output_dir: Path = Path("analysis/stardates")
    generate_plots: bool = False

    def __post_init__(self):
        """Coerce path fields and validate numeric settings."""
        self.scripts_dir = Path(self.scripts_dir)
        self.titles_cache = Path(self.titles_cache)
        self.output_dir = Path(self.output_dir)

        if self.expected_episode_count is not None and self.expected_episode_count < 1:
            raise ValueError("expected_episode_count must be positive")
        if self.request_retries < 1:
            raise ValueError("request_retries must be at least 1")

    @classmethod
    def from_json(cls, path: Path, **overrides) -> 'PipelineConfig':
        """
        Load configuration from a JSON file.

        Unknown keys are rejected; keyword overrides that are not None win
        over file values.
        """
        with open(path, 'r', encoding='utf-8') as f:
            values = json.load(f)

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Path):
                data[key] = str(value)
        return data
