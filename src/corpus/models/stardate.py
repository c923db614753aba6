"""
Stardate record model.

One record per stardate token that survives extraction and cleaning.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class StardateRecord:
    """
    A cleaned stardate row.

    ``episode`` is not unique: an episode may quote several stardates.
    ``stardate_decimal`` is always present, with 0 as the fallback value.
    ``episode_title`` stays ``None`` when the title lookup has no entry.
    """

    episode: int
    season: int
    stardate: float
    stardate_decimal: int
    episode_title: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'StardateRecord':
        """Build a record from a table row, mapping missing titles to None."""
        title = row.get('episode_title')
        if title is not None and isinstance(title, float) and math.isnan(title):
            title = None
        return cls(
            episode=int(row['episode']),
            season=int(row['season']),
            stardate=float(row['stardate']),
            stardate_decimal=int(row['stardate_decimal']),
            episode_title=title,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)
