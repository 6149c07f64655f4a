"""
Tadoku Stats - Core Package

This package contains the modules for:
- Scoring and ranking of contest entries (tadoku_stats.scoring)
- Data ingestion: scraping and snapshots (tadoku_stats.ingestion)
- Text rendering and the command line driver
- Shared configuration and utilities
"""

from tadoku_stats.config import *
