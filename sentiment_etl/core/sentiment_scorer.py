"""
Bilingual keyword-lexicon sentiment scorer.

Scores Indonesian and English text by summing the weights of lexicon terms
found among its tokens, normalizing by token count, and mapping the result to
a positive/negative/neutral label with a small dead band around zero.
"""
import logging
import unicodedata
from typing import Iterable, List, Optional

from sentiment_etl.core.lexicon import Lexicon, default_lexicon
from sentiment_etl.models.dtos import SentimentResult

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 0.02
NEGATIVE_THRESHOLD = -0.02


def _is_separator(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch).startswith("P")


def tokenize(text: str) -> List[str]:
    """
    Split text on whitespace and Unicode punctuation.

    Tokens of a single character are dropped. Case is preserved.
    """
    tokens = []
    current = []
    for ch in text:
        if _is_separator(ch):
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)
    if current:
        tokens.append("".join(current))
    return [t for t in tokens if len(t) > 1]


def _confidence(primary: int, secondary: int, total: int) -> float:
    """
    Coverage of classified tokens times the dominant category's share of them.
    """
    classified = primary + secondary
    if total == 0 or classified == 0:
        return 0.0
    confidence = (classified / total) * (primary / classified)
    return min(confidence, 1.0)


class SentimentScorer:
    """
    Pure, stateless scorer over an immutable lexicon. Safe to share across tasks.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.lexicon = lexicon or default_lexicon()

    def score(self, text: str) -> SentimentResult:
        """
        Scores a piece of text.

        Args:
            text: The text to score. May be empty.

        Returns:
            A SentimentResult with the label, the score in [-1, 1], the
            confidence in [0, 1] and the matched positive/negative terms in
            the order they occur.
        """
        if not text:
            return SentimentResult()

        tokens = tokenize(text)
        total_score = 0.0
        matched: List[str] = []
        positive = negative = neutral = 0

        for token in tokens:
            key = token.lower()
            if key in self.lexicon.positive:
                total_score += self.lexicon.positive[key]
                matched.append(token)
                positive += 1
            elif key in self.lexicon.negative:
                total_score += self.lexicon.negative[key]
                matched.append(token)
                negative += 1
            elif key in self.lexicon.neutral:
                neutral += 1

        score = 0.0
        if tokens:
            score = max(-1.0, min(1.0, total_score / len(tokens)))

        if score > POSITIVE_THRESHOLD:
            category = "positive"
            confidence = _confidence(positive, negative, len(tokens))
        elif score < NEGATIVE_THRESHOLD:
            category = "negative"
            confidence = _confidence(negative, positive, len(tokens))
        else:
            category = "neutral"
            confidence = _confidence(neutral, positive + negative, len(tokens))

        return SentimentResult(
            category=category,
            score=score,
            confidence=confidence,
            matched_terms=matched,
        )

    def score_many(self, texts: Iterable[str]) -> List[SentimentResult]:
        """Scores each text independently, preserving input order."""
        return [self.score(text) for text in texts]
