"""
Configuration management for AdInsight
"""

import os
import yaml
from pathlib import Path
from typing import Optional, List, Union
from dataclasses import dataclass, field, fields
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _split_env_list(name: str) -> List[str]:
    """Read a comma-separated environment variable into a list."""
    raw = os.getenv(name, '')
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Application configuration"""

    # Supabase
    SUPABASE_URL: str = os.getenv('SUPABASE_URL', '')
    SUPABASE_SERVICE_KEY: str = os.getenv('SUPABASE_SERVICE_KEY', '')

    # YouTube Data API
    YOUTUBE_API_KEY: str = os.getenv('YOUTUBE_API_KEY', '')

    # Gemini
    GEMINI_API_KEY: str = os.getenv('GEMINI_API_KEY', '')
    GEMINI_INSIGHT_MODEL: str = os.getenv('GEMINI_INSIGHT_MODEL', 'gemini-2.0-flash')
    GEMINI_REQUESTS_PER_MINUTE: int = int(os.getenv('GEMINI_REQUESTS_PER_MINUTE', '9'))

    # Catalog sync
    YOUTUBE_CHANNELS: List[str] = _split_env_list('YOUTUBE_CHANNELS')
    SEARCH_KEYWORDS: List[str] = _split_env_list('SEARCH_KEYWORDS')
    CHANNEL_MAX_RESULTS: int = int(os.getenv('CHANNEL_MAX_RESULTS', '10'))
    SEARCH_MAX_RESULTS: int = int(os.getenv('SEARCH_MAX_RESULTS', '10'))

    # Analysis
    MAX_COMMENTS: int = int(os.getenv('MAX_COMMENTS', '100'))
    ANALYSIS_CONFIG_PATH: str = os.getenv('ANALYSIS_CONFIG_PATH', '')

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        required = {
            'SUPABASE_URL': cls.SUPABASE_URL,
            'SUPABASE_SERVICE_KEY': cls.SUPABASE_SERVICE_KEY,
        }

        missing = [k for k, v in required.items() if not v]

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get configuration value"""
        return getattr(cls, key, default)


# ============================================================================
# Analysis tunables
# ============================================================================

DEFAULT_SPONSOR_INDICATORS = [
    'sponsor', 'sponsored', 'partnership', 'partnered', 'promotion', 'promoted',
    'thanks to', 'paid promotion', 'sponsored by', 'affiliate', 'discount code',
    'promo code', 'use code', 'click the link', 'check out', 'thanks to our sponsor',
]

DEFAULT_AD_KEYWORDS = ['ad', 'sponsor', 'promotion', 'sponsored', 'brand', 'product']

DEFAULT_NEGATIONS = ['not', 'no', 'never', 'neither']


@dataclass(frozen=True)
class DetectionRules:
    """Keyword lists driving sponsorship detection and keyword sentiment."""
    sponsor_indicators: List[str] = field(default_factory=lambda: list(DEFAULT_SPONSOR_INDICATORS))
    ad_keywords: List[str] = field(default_factory=lambda: list(DEFAULT_AD_KEYWORDS))
    negations: List[str] = field(default_factory=lambda: list(DEFAULT_NEGATIONS))


@dataclass(frozen=True)
class ScoringWeights:
    """
    Scoring policy constants.

    Defaults:
        like_weight / comment_weight: 0.7 / 0.3 mix for the raw engagement score
        engagement_scale: raw engagement score multiplier before capping at 100
        engagement_weight / sentiment_weight: 0.5 / 0.5 mix for effectiveness
        positive_threshold / negative_threshold: +/-0.05 comment polarity cut-offs
        long_form_threshold_sec: ad segments longer than this are Long-form
        comment_sample_size: comments quoted in the insight prompt
        description_limit: description characters quoted in the insight prompt
    """
    like_weight: float = 0.7
    comment_weight: float = 0.3
    engagement_scale: float = 10.0
    engagement_weight: float = 0.5
    sentiment_weight: float = 0.5
    positive_threshold: float = 0.05
    negative_threshold: float = -0.05
    long_form_threshold_sec: float = 60.0
    comment_sample_size: int = 5
    description_limit: int = 1000


@dataclass(frozen=True)
class AnalysisConfig:
    """Complete tunable configuration for the analysis engine"""
    rules: DetectionRules = field(default_factory=DetectionRules)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    lexicon_path: Optional[Path] = None


def load_analysis_config(config_path: Optional[Union[str, Path]] = None) -> AnalysisConfig:
    """
    Load analysis tunables from YAML.

    Falls back to Config.ANALYSIS_CONFIG_PATH, then to built-in defaults.
    Unknown keys are rejected so typos in a rules file surface immediately.

    Expected layout:
        rules:
          sponsor_indicators: [...]
          ad_keywords: [...]
          negations: [...]
        weights:
          like_weight: 0.7
          ...
        lexicon_path: path/to/lexicon.yml

    Args:
        config_path: Path to the YAML file (optional)

    Returns:
        AnalysisConfig instance

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        ValueError: If the file contains unknown keys
    """
    path_value = config_path or Config.ANALYSIS_CONFIG_PATH
    if not path_value:
        return AnalysisConfig()

    path = Path(path_value)
    if not path.exists():
        raise FileNotFoundError(f"Analysis configuration not found at {path}")

    with open(path, 'r') as f:
        raw_config = yaml.safe_load(f) or {}

    rules_data = raw_config.get('rules', {}) or {}
    weights_data = raw_config.get('weights', {}) or {}

    _reject_unknown_keys('rules', rules_data, DetectionRules)
    _reject_unknown_keys('weights', weights_data, ScoringWeights)

    lexicon_path = raw_config.get('lexicon_path')
    if lexicon_path:
        lexicon_path = Path(lexicon_path)
        if not lexicon_path.is_absolute():
            lexicon_path = path.parent / lexicon_path

    int_fields = {'comment_sample_size', 'description_limit'}
    weights = ScoringWeights(**{
        key: int(value) if key in int_fields else float(value)
        for key, value in weights_data.items()
    })

    return AnalysisConfig(
        rules=DetectionRules(**rules_data),
        weights=weights,
        lexicon_path=lexicon_path,
    )


def _reject_unknown_keys(section: str, data: dict, dataclass_type) -> None:
    known = {f.name for f in fields(dataclass_type)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {section} keys in analysis configuration: {', '.join(unknown)}")
