"""
AI analysis of journal entries.

One Claude call per request. The structured output is obtained by forcing a
tool call whose input schema is the analysis shape, so the reply arrives as
already-parsed JSON and only needs validating. There is no retry and no
partial result: whatever goes wrong propagates to the caller.
"""

import logging
import time
from typing import Optional

from anthropic import AsyncAnthropic

from mindful_journal.core.logging_utils import log_llm_usage, sanitize_for_logging
from mindful_journal.features.analysis.prompts import (
    ANALYSIS_TOOL_NAME,
    build_entry_analysis_prompt,
    entry_analysis_tool,
)
from mindful_journal.features.journal.models import Analysis
from mindful_journal.shared.errors import AnalysisError, AnalysisInputTooShort, ConfigurationError

logger = logging.getLogger("MindfulJournal.Analysis")

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


class EntryAnalyzer:
    """Sentiment, tags, summary and advice for a piece of journal text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        min_length: int = 10,
        max_tokens: int = 1024,
        client: Optional[AsyncAnthropic] = None,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self.model = model
        self.min_length = min_length
        self.max_tokens = max_tokens

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError("ANTHROPIC_API_KEY is not set")
            self._client = AsyncAnthropic(api_key=self._api_key)
            logger.info("Anthropic client initialized for model %s", self.model)
        return self._client

    async def analyze(self, text: str) -> Analysis:
        """
        Analyze entry text.

        Raises:
            AnalysisInputTooShort: text is shorter than ``min_length``; the
                endpoint is not contacted.
            AnalysisError: the reply carried no analysis.
            anthropic.APIError, pydantic.ValidationError: passed through.
        """
        if not text or len(text) < self.min_length:
            raise AnalysisInputTooShort()

        started = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                tools=[entry_analysis_tool()],
                tool_choice={"type": "tool", "name": ANALYSIS_TOOL_NAME},
                messages=[{"role": "user", "content": build_entry_analysis_prompt(text)}],
            )
        except Exception as exc:
            logger.error("Analysis request failed: %s", sanitize_for_logging(exc))
            raise

        usage = getattr(response, "usage", None)
        if usage is not None:
            log_llm_usage(
                model=self.model,
                input_tokens=int(getattr(usage, "input_tokens", 0) or 0),
                output_tokens=int(getattr(usage, "output_tokens", 0) or 0),
                duration_ms=int((time.monotonic() - started) * 1000),
            )

        tool_input = next(
            (
                block.input
                for block in response.content or []
                if getattr(block, "type", None) == "tool_use"
                and getattr(block, "name", None) == ANALYSIS_TOOL_NAME
            ),
            None,
        )
        if tool_input is None:
            raise AnalysisError("No response from AI")

        analysis = Analysis.model_validate(tool_input)
        logger.info(
            "Entry analyzed: sentiment=%s score=%.2f tags=%d",
            analysis.sentiment.value,
            analysis.sentiment_score,
            len(analysis.tags),
        )
        return analysis
