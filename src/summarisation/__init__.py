"""AI summarisation of extracted content."""

from src.summarisation.config import SummarisationConfig, get_summarisation_settings
from src.summarisation.exceptions import SummarisationError
from src.summarisation.models import SummaryRequest, SummaryResult
from src.summarisation.providers import BedrockProvider, SummaryProvider
from src.summarisation.summariser import HybridSummariser, build_summariser, fallback_summary

__all__ = [
    "BedrockProvider",
    "HybridSummariser",
    "SummarisationConfig",
    "SummarisationError",
    "SummaryProvider",
    "SummaryRequest",
    "SummaryResult",
    "build_summariser",
    "fallback_summary",
    "get_summarisation_settings",
]
