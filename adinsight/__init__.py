"""
AdInsight - Advertising intelligence for YouTube videos

Turns video metadata and viewer comments into sponsorship detection,
engagement and sentiment metrics, an effectiveness score and AI-written
narrative insight.
"""

__version__ = "0.1.0"
__author__ = "AdInsight Team"
