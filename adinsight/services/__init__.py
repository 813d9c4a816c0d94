"""
Services layer for AdInsight.

Provides clean separation between data access (YouTubeService,
InsightStoreService), AI operations (GeminiService) and the report
pipeline (InsightComposer, AdInsightService, VideoSyncService).

Concrete services are imported from their modules so that importing the
package does not pull in every SDK.
"""

from ..core.models import (
    AdStyle,
    ErrorKind,
    AdInsightReport,
    ReportResult,
    BatchResult,
    SyncResult,
)

__all__ = [
    'AdStyle',
    'ErrorKind',
    'AdInsightReport',
    'ReportResult',
    'BatchResult',
    'SyncResult',
]
