"""
Core module - Database, configuration, exceptions and data models
"""

from .database import get_supabase_client, reset_supabase_client
from .config import Config, AnalysisConfig, DetectionRules, ScoringWeights, load_analysis_config
from .exceptions import AdInsightError, ExternalServiceError

__all__ = [
    'get_supabase_client',
    'reset_supabase_client',
    'Config',
    'AnalysisConfig',
    'DetectionRules',
    'ScoringWeights',
    'load_analysis_config',
    'AdInsightError',
    'ExternalServiceError',
]
