"""Claude-backed description service."""

import logging
from typing import List, Optional

from ..config import GeneratorConfig
from .claude_client import ClaudeClient
from .prompt_builder import PromptBuilder
from .response_parser import ClaudeResponseParser

logger = logging.getLogger(__name__)


class ClaudeDescriptionService:
    """Asks Claude for declaration, parameter and return value descriptions.

    Each method returns None when Claude's answer is malformed. Client
    errors (rate limits, timeouts, API errors) propagate to the caller.

    Args:
        client: Client used for the requests.
        prompt_builder: Builds prompts and tool schemas in the target language.
    """

    def __init__(self, client: ClaudeClient, prompt_builder: PromptBuilder):
        self.client = client
        self.prompt_builder = prompt_builder

    @classmethod
    def from_config(
        cls, config: GeneratorConfig, max_retries: int = 3, timeout: float = 30.0
    ) -> Optional["ClaudeDescriptionService"]:
        """Create the service from settings, or None when no API key is set."""
        api_key = config.api_key
        if not api_key:
            return None
        client = ClaudeClient(
            api_key=api_key,
            model=config.generative_model,
            max_retries=max_retries,
            timeout=timeout,
        )
        return cls(client, PromptBuilder(config.generative_language))

    async def close(self) -> None:
        await self.client.close()

    async def describe_snippet(self, source: str, kind: str) -> Optional[str]:
        """Describe a declaration; multi-sentence answers span several lines."""
        result = await self.client.call_tool(
            self.prompt_builder.system_prompt,
            self.prompt_builder.build_prompt(source, kind),
            self.prompt_builder.snippet_tool(kind),
        )
        description = ClaudeResponseParser.parse_description(result)
        if description is None:
            logger.debug("Malformed description result for %s: %r", kind, result)
        return description

    async def describe_parameters(
        self, source: str, kind: str, generics: bool, names: List[str]
    ) -> Optional[List[str]]:
        """Describe parameters (or type parameters) by name, keeping their order."""
        if not names:
            return []
        result = await self.client.call_tool(
            self.prompt_builder.system_prompt,
            self.prompt_builder.build_prompt(source, kind),
            self.prompt_builder.parameters_tool(names, generics),
        )
        descriptions = ClaudeResponseParser.parse_parameter_descriptions(result, names)
        if descriptions is None:
            logger.debug("Malformed parameter descriptions for %s: %r", kind, result)
        return descriptions

    async def describe_return(self, source: str) -> Optional[str]:
        """Describe the return value of a function."""
        result = await self.client.call_tool(
            self.prompt_builder.system_prompt,
            self.prompt_builder.build_prompt(source, "function"),
            self.prompt_builder.return_tool(),
        )
        return ClaudeResponseParser.parse_description(result)
