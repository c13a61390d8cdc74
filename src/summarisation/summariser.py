"""Summarisation with ordered provider fallback."""

import logging
from collections.abc import Sequence

from src.summarisation.config import SummarisationConfig
from src.summarisation.models import SummaryRequest, SummaryResult
from src.summarisation.providers import BedrockProvider, SummaryProvider

logger = logging.getLogger(__name__)

FALLBACK_WORD_LIMIT = 50
NO_PROVIDERS_ERROR = "No AI providers configured"
ALL_FAILED_ERROR = "All AI providers failed, using basic text truncation"


class HybridSummariser:
    """Tries each provider in turn and falls back to plain truncation."""

    name = "hybrid"

    def __init__(self, providers: Sequence[SummaryProvider]) -> None:
        """Initialise the summariser.

        :param providers: Providers in the order they should be tried.
        """
        self._providers = list(providers)

    @property
    def providers(self) -> list[SummaryProvider]:
        """The configured providers, in fallback order."""
        return list(self._providers)

    def summarise(self, request: SummaryRequest) -> SummaryResult:
        """Summarise content with the first provider that succeeds.

        :param request: The content to summarise.
        :returns: The first usable result, or a truncation fallback.
        """
        if not self._providers:
            return SummaryResult(
                summary=request.summary or request.title or "No content to summarise",
                provider="fallback",
                model="none",
                error=NO_PROVIDERS_ERROR,
            )

        for provider in self._providers:
            result = provider.summarise(request)
            if result.ok:
                logger.debug(f"Summarised with {provider.name} ({provider.model})")
                return result
            logger.warning(f"Provider {provider.name} ({provider.model}) failed: {result.error}")

        return fallback_summary(request)

    def summarise_batch(self, requests: Sequence[SummaryRequest]) -> list[SummaryResult]:
        """Summarise several items independently.

        :param requests: The items to summarise.
        :returns: One result per request, in order.
        """
        return [self.summarise(request) for request in requests]


def fallback_summary(request: SummaryRequest) -> SummaryResult:
    """Build a summary by truncating the source text to its first words.

    :param request: The content to summarise.
    :returns: The truncated summary, flagged with an error.
    """
    text = request.content or request.summary or request.title
    words = text.split()
    summary = " ".join(words[:FALLBACK_WORD_LIMIT])
    if len(words) > FALLBACK_WORD_LIMIT:
        summary += "..."

    return SummaryResult(
        summary=summary,
        provider=HybridSummariser.name,
        model="fallback",
        error=ALL_FAILED_ERROR,
    )


def build_summariser(config: SummarisationConfig) -> HybridSummariser:
    """Build a summariser from explicit configuration.

    :param config: The summarisation configuration.
    :returns: A summariser over the configured Bedrock models, or one with
        no providers when summarisation is disabled.
    """
    if not config.enabled:
        logger.info("AI summarisation disabled")
        return HybridSummariser([])

    providers = [
        BedrockProvider(model_id, region_name=config.region_name) for model_id in config.model_ids
    ]
    logger.info(f"AI summarisation enabled with {len(providers)} provider(s)")
    return HybridSummariser(providers)
