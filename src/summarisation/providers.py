"""Summarisation providers backed by hosted models."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.summarisation.exceptions import SummarisationError
from src.summarisation.models import SummaryRequest, SummaryResult

if TYPE_CHECKING:
    from mypy_boto3_bedrock_runtime import BedrockRuntimeClient

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 1000
TEMPERATURE = 0.3

SYSTEM_PROMPT = (
    "You are a professional content summariser. Focus on key insights, main points "
    "and actionable takeaways. Use clear, professional language. "
    "Output only the summary."
)


class SummaryProvider(ABC):
    """A single model that can summarise content."""

    name: str

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the model behind this provider."""
        ...

    @abstractmethod
    def summarise(self, request: SummaryRequest) -> SummaryResult:
        """Summarise content. Failures are reported on the result.

        :param request: The content to summarise.
        :returns: The summary, or a result carrying an error.
        """
        ...


class BedrockProvider(SummaryProvider):
    """Summarises content with a model on AWS Bedrock via the Converse API."""

    name = "bedrock"

    def __init__(
        self,
        model_id: str,
        *,
        region_name: str = "eu-west-2",
        client: BedrockRuntimeClient | None = None,
    ) -> None:
        """Initialise the provider.

        :param model_id: Full Bedrock model ID.
        :param region_name: AWS region hosting the model.
        :param client: Optional pre-built bedrock-runtime client.
        """
        self._model_id = model_id
        self._client: BedrockRuntimeClient = client or boto3.client(
            "bedrock-runtime",
            region_name=region_name,
        )
        logger.debug(f"Initialised BedrockProvider: model={model_id}, region={region_name}")

    @property
    def model(self) -> str:
        """The Bedrock model ID."""
        return self._model_id

    def summarise(self, request: SummaryRequest) -> SummaryResult:
        """Summarise content with the configured model.

        :param request: The content to summarise.
        :returns: The summary, or a result carrying the API error.
        """
        try:
            summary, tokens_used = self._converse(request)
        except SummarisationError as e:
            logger.warning(f"Bedrock summarisation failed: model={self._model_id}, error={e}")
            return SummaryResult(summary="", provider=self.name, model=self._model_id, error=str(e))

        return SummaryResult(
            summary=summary or "No summary generated",
            provider=self.name,
            model=self._model_id,
            tokens_used=tokens_used,
        )

    def _converse(self, request: SummaryRequest) -> tuple[str, int | None]:
        """Call the Converse API.

        :param request: The content to summarise.
        :returns: The summary text and total tokens used.
        :raises SummarisationError: If the API call fails.
        """
        prompt = (
            f"Create a concise, engaging summary of the following content in "
            f"{request.max_length} words or less.\n\n"
            f"Title: {request.title or 'No title'}\n\n"
            f"Content: {request.source_text}"
        )

        try:
            start_time = time.perf_counter()
            response = self._client.converse(
                modelId=self._model_id,
                messages=[{"role": "user", "content": [{"text": prompt}]}],
                system=[{"text": SYSTEM_PROMPT}],
                inferenceConfig={
                    "maxTokens": min(request.max_length * 2, MAX_OUTPUT_TOKENS),
                    "temperature": TEMPERATURE,
                },
            )
            latency_ms = int((time.perf_counter() - start_time) * 1000)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            raise SummarisationError(
                f"Bedrock API call failed: {error_code} - {error_message}"
            ) from e
        except BotoCoreError as e:
            raise SummarisationError(f"Bedrock API call failed: {e}") from e

        usage = response.get("usage", {})
        logger.debug(f"Bedrock response: usage={usage}, latency_ms={latency_ms}")

        content = response.get("output", {}).get("message", {}).get("content", [])
        text = "\n".join(block["text"] for block in content if "text" in block)

        return text.strip(), usage.get("totalTokens")
