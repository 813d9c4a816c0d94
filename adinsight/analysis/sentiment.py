"""
Lexicon-based comment sentiment.

Each comment is tokenized into words and scored with an AFINN-style lexicon:
the signed word weights are summed (a negation word flips the sign of every
later hit) and divided by the token count. Scores above/below the configured
thresholds are positive/negative, everything else neutral.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

import yaml

from ..core.config import DetectionRules, ScoringWeights
from ..core.models import (
    CommentAdSignals,
    CommentSentiment,
    KeywordSentiment,
    ScoredComment,
    SentimentSummary,
    VideoComment,
)

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "data" / "sentiment_lexicon.yml"

WORD_SEPARATOR = re.compile(r'[^A-Za-zА-Яа-я0-9_]+')

CommentLike = Union[VideoComment, str]

# Leading tokens kept with a stored comment
KEYWORD_TOKEN_LIMIT = 10


def load_lexicon(path: Optional[Union[str, Path]] = None) -> Dict[str, int]:
    """
    Load a word -> weight lexicon from YAML.

    Args:
        path: Lexicon file (defaults to the bundled lexicon)

    Returns:
        Mapping of lower-cased word to integer weight
    """
    lexicon_path = Path(path) if path else DEFAULT_LEXICON_PATH
    with open(lexicon_path, 'r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}

    lexicon = {str(word).lower(): int(weight) for word, weight in raw.items()}
    logger.debug(f"Loaded {len(lexicon)} lexicon entries from {lexicon_path}")
    return lexicon


def tokenize(text: str) -> List[str]:
    """Split text into word tokens."""
    if not text:
        return []
    return [token for token in WORD_SEPARATOR.split(text) if token]


class SentimentAnalyzer:
    """
    Scores comment polarity and aggregates it per ad-related keyword.

    Example usage:
        analyzer = SentimentAnalyzer()
        summary = analyzer.analyze(["Love this!", "The ad was way too long"])
        print(summary.positive_percentage, summary.keyword_sentiment)
    """

    def __init__(
        self,
        lexicon: Optional[Dict[str, int]] = None,
        rules: Optional[DetectionRules] = None,
        weights: Optional[ScoringWeights] = None
    ):
        self.lexicon = lexicon if lexicon is not None else load_lexicon()
        self.rules = rules or DetectionRules()
        self.weights = weights or ScoringWeights()
        self._negations = {word.lower() for word in self.rules.negations}

    def score_tokens(self, tokens: Sequence[str]) -> float:
        """Average signed lexicon weight per token (0.0 for no tokens)."""
        if not tokens:
            return 0.0

        score = 0.0
        negator = 1
        for token in tokens:
            word = token.lower()
            if word in self._negations:
                negator = -1
            elif word in self.lexicon:
                score += negator * self.lexicon[word]

        return score / len(tokens)

    def score_text(self, text: str) -> float:
        return self.score_tokens(tokenize(text))

    def classify(self, score: float) -> str:
        """Return "positive", "negative" or "neutral" for a score."""
        if score > self.weights.positive_threshold:
            return "positive"
        if score < self.weights.negative_threshold:
            return "negative"
        return "neutral"

    def ad_keywords_in(self, text: str) -> List[str]:
        """Configured ad keywords contained in text (lower-cased substring match)."""
        text_lower = (text or "").lower()
        return [keyword for keyword in self.rules.ad_keywords if keyword in text_lower]

    def score_comment(self, video_id: str, comment: VideoComment) -> ScoredComment:
        """
        Score one comment for storage.

        score is already per token; comparative divides it by the token count
        once more.
        """
        tokens = tokenize(comment.text)
        score = self.score_tokens(tokens)
        ad_keywords = self.ad_keywords_in(comment.text)

        return ScoredComment(
            video_id=video_id,
            comment=comment,
            sentiment=CommentSentiment(
                score=score,
                comparative=score / len(tokens) if tokens else 0.0,
                classification=self.classify(score),
                keywords=tokens[:KEYWORD_TOKEN_LIMIT],
            ),
            ad_related=CommentAdSignals(
                is_ad_related=bool(ad_keywords),
                ad_keywords=ad_keywords,
            ),
        )

    def analyze(self, comments: Optional[Iterable[CommentLike]]) -> SentimentSummary:
        """
        Summarize the sentiment of a comment sample.

        Args:
            comments: VideoComment models or raw comment strings

        Returns:
            SentimentSummary; all zero for an empty sample
        """
        texts = [_comment_text(comment) for comment in (comments or [])]
        if not texts:
            return SentimentSummary()

        total_sentiment = 0.0
        counts = {"positive": 0, "negative": 0, "neutral": 0}
        keyword_counts: Dict[str, int] = {}
        keyword_totals: Dict[str, float] = {}

        for text in texts:
            score = self.score_text(text)
            total_sentiment += score
            counts[self.classify(score)] += 1

            for keyword in self.ad_keywords_in(text):
                keyword_counts[keyword] = keyword_counts.get(keyword, 0) + 1
                keyword_totals[keyword] = keyword_totals.get(keyword, 0.0) + score

        total = len(texts)
        return SentimentSummary(
            average_sentiment=total_sentiment / total,
            positive_percentage=100 * counts["positive"] / total,
            negative_percentage=100 * counts["negative"] / total,
            neutral_percentage=100 * counts["neutral"] / total,
            total_comments=total,
            keyword_sentiment={
                keyword: KeywordSentiment(
                    count=count,
                    total_sentiment=keyword_totals[keyword],
                    average_sentiment=keyword_totals[keyword] / count,
                )
                for keyword, count in keyword_counts.items()
            },
        )


def _comment_text(comment: CommentLike) -> str:
    if isinstance(comment, str):
        return comment
    return comment.text or ""
