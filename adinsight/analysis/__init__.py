"""
Analysis module - heuristic ad detection and scoring
"""

from .timestamps import parse_timestamp
from .brands import extract_brands
from .sponsorship import SponsorshipDetector, detect_sponsorship
from .engagement import compute_engagement
from .sentiment import SentimentAnalyzer, load_lexicon, tokenize
from .effectiveness import score_effectiveness
from .enrichment import enrich_video

__all__ = [
    'parse_timestamp',
    'extract_brands',
    'SponsorshipDetector',
    'detect_sponsorship',
    'compute_engagement',
    'SentimentAnalyzer',
    'load_lexicon',
    'tokenize',
    'score_effectiveness',
    'enrich_video',
]
