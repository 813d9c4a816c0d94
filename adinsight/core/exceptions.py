"""
Exception types raised at external collaborator boundaries.
"""


class AdInsightError(Exception):
    """Base class for AdInsight errors."""


class ExternalServiceError(AdInsightError):
    """
    An external collaborator (YouTube, Gemini, Supabase) was unreachable or
    returned an error.

    Attributes:
        service: Short collaborator name, e.g. "youtube", "gemini", "supabase"
    """

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message
