"""
CLI module for AdInsight
"""

from .main import cli

__all__ = ['cli']
