"""
Asynchronous Claude client used by the description service.

Every request forces one call of a caller-supplied tool, so the answer
arrives as a JSON object shaped by the tool's input schema instead of as
free text. Timeouts and rate limits are retried with exponential backoff;
any other API error is raised on the first attempt.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

import anthropic
from anthropic.types import ToolUseBlock

from ..config import DEFAULT_MODEL

logger = logging.getLogger(__name__)


class ClaudeClient:
    """
    Sends tool-forced requests to Claude.

    Parameters
    ----------
    api_key : str, optional
        Anthropic API key. Read from ANTHROPIC_API_KEY when omitted.
    model : str, optional
        Model answering the requests.
    max_retries : int, optional
        Total attempts allowed for a request that times out or is rate limited.
    retry_delay : float, optional
        Delay in seconds before the first retry; doubled for each later one.
    timeout : float, optional
        Per-attempt timeout in seconds.

    Raises
    ------
    ValueError
        If no API key is given and ANTHROPIC_API_KEY is unset.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0
    ):
        self.api_key = api_key or os.environ.get('ANTHROPIC_API_KEY')
        if not self.api_key:
            raise ValueError(
                "API key must be provided either as parameter or via "
                "ANTHROPIC_API_KEY environment variable"
            )

        self.model = model
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.client = anthropic.AsyncAnthropic(api_key=self.api_key)

    def _should_retry(self, attempt: int) -> tuple[bool, float]:
        """Return whether attempt ``attempt`` (0-based) may be retried, and after how long."""
        if attempt + 1 >= self.max_retries:
            return (False, 0.0)
        return (True, self.retry_delay * 2 ** attempt)

    async def call_tool(
        self,
        system: str,
        prompt: str,
        tool: Dict[str, Any],
        max_tokens: int = 1024
    ) -> Dict[str, Any]:
        """
        Ask Claude to answer ``prompt`` by calling ``tool``.

        Parameters
        ----------
        system : str
            System prompt.
        prompt : str
            User message holding the code to describe.
        tool : dict
            Tool definition with 'name', 'description' and 'input_schema'.
        max_tokens : int, optional
            Token limit of the answer.

        Returns
        -------
        dict
            Arguments the model passed to the tool.

        Raises
        ------
        RuntimeError
            If every attempt timed out, or the answer holds no call of ``tool``.
        anthropic.RateLimitError
            If the last attempt was rate limited.
        anthropic.APIError
            For any other API failure.
        """
        request = {
            "model": self.model,
            "max_tokens": max_tokens,
            "timeout": self.timeout,
            "system": system,
            "tools": [tool],
            "tool_choice": {"type": "tool", "name": tool["name"]},
            "messages": [{"role": "user", "content": prompt}],
        }

        attempt = 0
        while True:
            try:
                message = await self.client.messages.create(**request)
            except (anthropic.APITimeoutError, anthropic.RateLimitError) as e:
                should_retry, delay = self._should_retry(attempt)
                if not should_retry:
                    if isinstance(e, anthropic.APITimeoutError):
                        raise RuntimeError(
                            f"Claude API request timed out after {self.max_retries} attempts "
                            f"of {self.timeout} seconds each."
                        ) from e
                    raise
                logger.debug("%s on attempt %d, retrying in %.1fs", type(e).__name__, attempt + 1, delay)
                await asyncio.sleep(delay)
                attempt += 1
                continue
            return self._tool_input(message, tool["name"])

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.close()

    @staticmethod
    def _tool_input(message: Any, tool_name: str) -> Dict[str, Any]:
        for block in message.content:
            if isinstance(block, ToolUseBlock) or getattr(block, 'type', None) == 'tool_use':
                return block.input
        raise RuntimeError(f"Claude API response contained no '{tool_name}' tool call.")
