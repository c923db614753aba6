"""
Raw script model.

Holds the text lines of one episode script, read once and kept read-only
for the duration of a batch run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class RawScript:
    """
    The ordered text lines of a single episode script.

    Episode numbers follow broadcast order, starting at 1.
    """

    episode: int
    lines: Tuple[str, ...] = field(default_factory=tuple)
    source: Optional[Path] = None

    def __post_init__(self):
        """Freeze the line sequence so the script cannot change after loading."""
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, 'lines', tuple(self.lines))

    def __len__(self) -> int:
        """Return number of lines in the script."""
        return len(self.lines)

    def __repr__(self) -> str:
        return f"RawScript(episode={self.episode}, {len(self.lines)} lines)"
