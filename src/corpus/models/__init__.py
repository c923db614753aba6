"""
Data models for the stardate corpus.

This module provides the core data structures of the extraction pipeline:
- RawScript: the text lines of one episode script
- StardateRecord: one cleaned stardate row
"""

from .script import RawScript
from .stardate import StardateRecord

__all__ = ['RawScript', 'StardateRecord']
