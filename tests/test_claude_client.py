"""
Tests for ClaudeClient functionality including API interaction and response handling.
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jsdocgen.claude.claude_client import ClaudeClient

TOOL = {
    "name": "generate_jsdoc",
    "description": "Generates a description",
    "input_schema": {"type": "object", "properties": {"description": {"type": "string"}}},
}


def tool_message(payload):
    """Helper to create a message holding a single tool call."""
    mock_message = MagicMock()
    mock_message.content = [MagicMock(type="tool_use", input=payload)]
    return mock_message


def call(client, prompt="prompt", **kwargs):
    return asyncio.run(client.call_tool("system", prompt, TOOL, **kwargs))


class TestClaudeClientInitialization:
    """Test ClaudeClient initialization and configuration."""

    def test_initialization_with_api_key_parameter(self):
        """Test ClaudeClient initialization with API key as parameter."""
        client = ClaudeClient(api_key='sk-ant-test-key')
        assert client.api_key == 'sk-ant-test-key'
        assert client.model == 'claude-sonnet-4-20250514'
        assert client.max_retries == 3
        assert client.retry_delay == 1.0

    def test_initialization_with_environment_variable(self):
        """Test ClaudeClient initialization with API key from environment."""
        with patch.dict('os.environ', {'ANTHROPIC_API_KEY': 'sk-ant-env-key'}):
            client = ClaudeClient()
            assert client.api_key == 'sk-ant-env-key'

    def test_initialization_without_api_key_raises_error(self):
        """Test that missing API key raises ValueError."""
        with patch.dict('os.environ', {}, clear=True):
            with pytest.raises(ValueError, match='API key must be provided'):
                ClaudeClient()

    def test_custom_configuration(self):
        """Test ClaudeClient with custom model, retry and timeout settings."""
        client = ClaudeClient(
            api_key='sk-ant-test',
            model='claude-opus-4-20250514',
            max_retries=5,
            retry_delay=2.0,
            timeout=60.0,
        )
        assert client.model == 'claude-opus-4-20250514'
        assert client.max_retries == 5
        assert client.retry_delay == 2.0
        assert client.timeout == 60.0


class TestClaudeClientAPIInteraction:
    """Test ClaudeClient API calls and response handling."""

    @patch('anthropic.AsyncAnthropic')
    def test_successful_tool_call(self, mock_anthropic_class):
        """Test that the forced tool call's input is returned."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_client.messages.create = AsyncMock(return_value=tool_message({'description': 'Adds numbers.'}))

        client = ClaudeClient(api_key='sk-ant-test')
        result = call(client, 'Generate the JSDoc for this function')

        assert result == {'description': 'Adds numbers.'}
        mock_client.messages.create.assert_awaited_once()
        call_kwargs = mock_client.messages.create.call_args[1]
        assert call_kwargs['model'] == 'claude-sonnet-4-20250514'
        assert call_kwargs['max_tokens'] == 1024
        assert call_kwargs['system'] == 'system'
        assert call_kwargs['tools'] == [TOOL]
        assert call_kwargs['tool_choice'] == {'type': 'tool', 'name': 'generate_jsdoc'}
        assert call_kwargs['messages'][0]['role'] == 'user'
        assert call_kwargs['messages'][0]['content'] == 'Generate the JSDoc for this function'

    @patch('anthropic.AsyncAnthropic')
    def test_custom_max_tokens_and_timeout(self, mock_anthropic_class):
        """Test that max_tokens and timeout reach the API call."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_client.messages.create = AsyncMock(return_value=tool_message({}))

        client = ClaudeClient(api_key='sk-ant-test', timeout=45.0)
        call(client, max_tokens=2048)

        call_kwargs = mock_client.messages.create.call_args[1]
        assert call_kwargs['max_tokens'] == 2048
        assert call_kwargs['timeout'] == 45.0

    @patch('anthropic.AsyncAnthropic')
    def test_text_before_tool_call_is_skipped(self, mock_anthropic_class):
        """Test that text blocks ahead of the tool call are ignored."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_message = MagicMock()
        mock_message.content = [
            MagicMock(type='text', text='Here you go'),
            MagicMock(type='tool_use', input={'description': 'Found'}),
        ]
        mock_client.messages.create = AsyncMock(return_value=mock_message)

        client = ClaudeClient(api_key='sk-ant-test')

        assert call(client) == {'description': 'Found'}

    @patch('anthropic.AsyncAnthropic')
    def test_missing_tool_call_raises(self, mock_anthropic_class):
        """Test that a response without a tool call is an error."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_message = MagicMock()
        mock_message.content = [MagicMock(type='text', text='No tool')]
        mock_client.messages.create = AsyncMock(return_value=mock_message)

        client = ClaudeClient(api_key='sk-ant-test')

        with pytest.raises(RuntimeError, match='no .generate_jsdoc. tool call'):
            call(client)


class TestClaudeClientRetryLogic:
    """Test ClaudeClient retry behavior for rate limits and timeouts."""

    def _create_mock_response(self, status_code=429):
        """Helper to create a mock HTTP response."""
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.headers = {}
        return mock_response

    @patch('anthropic.AsyncAnthropic')
    @patch('asyncio.sleep', new_callable=AsyncMock)
    def test_retry_on_rate_limit(self, mock_sleep, mock_anthropic_class):
        """Test that client retries on rate limit error."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_response = self._create_mock_response(429)

        # First call raises RateLimitError, second succeeds
        mock_client.messages.create = AsyncMock(side_effect=[
            anthropic.RateLimitError('Rate limit exceeded', response=mock_response, body=None),
            tool_message({'description': 'Success'}),
        ])

        client = ClaudeClient(api_key='sk-ant-test', retry_delay=1.0)
        result = call(client)

        assert result == {'description': 'Success'}
        assert mock_client.messages.create.call_count == 2
        mock_sleep.assert_awaited_once_with(1.0)  # First retry: 1.0 * (2^0)

    @patch('anthropic.AsyncAnthropic')
    @patch('asyncio.sleep', new_callable=AsyncMock)
    def test_exponential_backoff(self, mock_sleep, mock_anthropic_class):
        """Test exponential backoff on multiple rate limit errors."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_response = self._create_mock_response(429)

        # Fail twice, succeed on third attempt
        mock_client.messages.create = AsyncMock(side_effect=[
            anthropic.RateLimitError('Rate limit', response=mock_response, body=None),
            anthropic.RateLimitError('Rate limit', response=mock_response, body=None),
            tool_message({'description': 'Success'}),
        ])

        client = ClaudeClient(api_key='sk-ant-test', retry_delay=1.0)
        call(client)

        assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]

    @patch('anthropic.AsyncAnthropic')
    @patch('asyncio.sleep', new_callable=AsyncMock)
    def test_rate_limit_exhausts_retries(self, mock_sleep, mock_anthropic_class):
        """Test that the last rate limit error propagates."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_response = self._create_mock_response(429)
        mock_client.messages.create = AsyncMock(
            side_effect=anthropic.RateLimitError('Rate limit', response=mock_response, body=None)
        )

        client = ClaudeClient(api_key='sk-ant-test', max_retries=3)

        with pytest.raises(anthropic.RateLimitError):
            call(client)
        assert mock_client.messages.create.call_count == 3
        assert mock_sleep.await_count == 2

    @patch('anthropic.AsyncAnthropic')
    @patch('asyncio.sleep', new_callable=AsyncMock)
    def test_timeout_retries_then_fails(self, mock_sleep, mock_anthropic_class):
        """Test that repeated timeouts end in a RuntimeError."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_client.messages.create = AsyncMock(
            side_effect=anthropic.APITimeoutError(request=MagicMock())
        )

        client = ClaudeClient(api_key='sk-ant-test', max_retries=2, timeout=5.0)

        with pytest.raises(RuntimeError, match='timed out after 2 attempts'):
            call(client)
        assert mock_client.messages.create.call_count == 2

    @patch('anthropic.AsyncAnthropic')
    @patch('asyncio.sleep', new_callable=AsyncMock)
    def test_no_retry_on_other_api_errors(self, mock_sleep, mock_anthropic_class):
        """Test that other API errors are raised immediately."""
        mock_client = MagicMock()
        mock_anthropic_class.return_value = mock_client
        mock_request = MagicMock()
        mock_client.messages.create = AsyncMock(
            side_effect=anthropic.APIError('Bad request', request=mock_request, body=None)
        )

        client = ClaudeClient(api_key='sk-ant-test')

        with pytest.raises(anthropic.APIError):
            call(client)
        assert mock_client.messages.create.call_count == 1
        mock_sleep.assert_not_awaited()

    def test_should_retry(self):
        """Test backoff delays and the retry limit."""
        client = ClaudeClient(api_key='sk-ant-test', max_retries=3, retry_delay=0.5)

        assert client._should_retry(0) == (True, 0.5)
        assert client._should_retry(1) == (True, 1.0)
        assert client._should_retry(2) == (False, 0.0)


class TestClaudeClientClose:
    """Test releasing the HTTP connection pool."""

    @patch('anthropic.AsyncAnthropic')
    def test_close_closes_underlying_client(self, mock_anthropic_class):
        mock_client = MagicMock()
        mock_client.close = AsyncMock()
        mock_anthropic_class.return_value = mock_client

        client = ClaudeClient(api_key='sk-ant-test')
        asyncio.run(client.close())

        mock_client.close.assert_awaited_once()
