"""
Topic sentiment ETL.

Pulls topic content from several third-party sources, scores relevance and
sentiment with a bilingual keyword lexicon, and persists normalized records.
"""

__version__ = "0.1.0"
