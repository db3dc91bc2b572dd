"""LLM analysis of the decrypted log."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from claude_agent_sdk import (
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ClaudeSDKError,
)
from claude_agent_sdk.types import AssistantMessage, ResultMessage, TextBlock

from captainslog.core.config import SUMMARY_MODEL
from captainslog.core.store import MessageStore
from captainslog.core.types import MessageRecord, format_timestamp

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert psychologist. Analyze the log you are given and provide "
    "a psychological summary. Focus on emotional patterns, potential stressors, "
    "and overall mental well-being. Be concise but insightful."
)


class SummaryError(RuntimeError):
    """Raised when the analysis service fails or returns nothing."""


def format_log_for_ai(records: Iterable[MessageRecord]) -> str:
    """Render records as ``[timestamp] text`` lines, oldest first."""
    return "\n".join(
        f"[{format_timestamp(record.timestamp)}] {record.text}" for record in records
    )


class LogSummarizer:
    """Asks Claude for a one-shot analysis of a rendered log."""

    def __init__(self, model: str | None = None):
        """
        Initialize the summarizer.

        Args:
            model: Claude model name (defaults to SUMMARY_MODEL, then SDK default)
        """
        self.model = model or SUMMARY_MODEL

    def _build_options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            system_prompt=SYSTEM_PROMPT,
            allowed_tools=[],
            max_turns=1,
            model=self.model,
        )

    async def summarize(self, log_content: str) -> str:
        """
        Produce an analysis of the log.

        Raises:
            SummaryError: If Claude can't be reached or returns no text
        """
        prompt = f"Log:\n{log_content}\n\nAnalysis:"
        result_text = ""
        try:
            async with ClaudeSDKClient(options=self._build_options()) as client:
                await client.query(prompt)
                async for message in client.receive_response():
                    if isinstance(message, AssistantMessage):
                        for block in message.content:
                            if isinstance(block, TextBlock):
                                result_text += block.text
                    elif isinstance(message, ResultMessage):
                        if message.is_error:
                            raise SummaryError(
                                f"Analysis failed: {message.result or 'unknown error'}"
                            )
                        if message.result:
                            result_text = message.result
        except ClaudeSDKError as e:
            logger.error("Error generating summary: %s", e)
            raise SummaryError(f"Failed to generate analysis: {e}") from e

        result_text = result_text.strip()
        if not result_text:
            raise SummaryError("Analysis returned no text")
        logger.debug("Summary generated (%d chars)", len(result_text))
        return result_text


class SummaryKind(StrEnum):
    EMPTY = "empty"
    UNREADABLE = "unreadable"
    ANALYSIS = "analysis"
    RAW = "raw"


@dataclass(frozen=True)
class LogSummary:
    """What to show the user for a summary request."""

    kind: SummaryKind
    text: str = ""
    error: Exception | None = None


async def summarize_log(store: MessageStore, summarizer: LogSummarizer) -> LogSummary:
    """
    Summarize the whole log, falling back to the raw log on analysis failure.

    Args:
        store: Log to read
        summarizer: Analysis backend

    Returns:
        LogSummary; kinds UNREADABLE and RAW carry the underlying error
    """
    snapshot = await store.load()
    if not snapshot.readable:
        return LogSummary(kind=SummaryKind.UNREADABLE, error=snapshot.error)
    if not snapshot.records:
        return LogSummary(kind=SummaryKind.EMPTY)

    log_content = format_log_for_ai(snapshot.records)
    try:
        analysis = await summarizer.summarize(log_content)
    except SummaryError as e:
        logger.error("Error in log analysis, showing raw log: %s", e)
        return LogSummary(kind=SummaryKind.RAW, text=log_content, error=e)

    return LogSummary(kind=SummaryKind.ANALYSIS, text=analysis)
