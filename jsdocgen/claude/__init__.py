"""Claude API integration for description generation."""

from .claude_client import ClaudeClient
from .description_service import ClaudeDescriptionService
from .prompt_builder import PromptBuilder
from .response_parser import ClaudeResponseParser

__all__ = ['ClaudeClient', 'ClaudeDescriptionService', 'ClaudeResponseParser', 'PromptBuilder']
