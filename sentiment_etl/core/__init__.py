"""
Core components for the sentiment ETL service.
"""

from .lexicon import Lexicon, default_lexicon, load_lexicon
from .sentiment_scorer import SentimentScorer
from .transformer import RecordTransformer
from .loader import DataLoader
from .reprocessor import SentimentReprocessor
from .pipeline import ETLPipeline, reprocess_sentiment, run_pipeline

__all__ = [
    "Lexicon",
    "default_lexicon",
    "load_lexicon",
    "SentimentScorer",
    "RecordTransformer",
    "DataLoader",
    "SentimentReprocessor",
    "ETLPipeline",
    "reprocess_sentiment",
    "run_pipeline",
]
