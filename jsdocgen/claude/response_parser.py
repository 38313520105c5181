"""Parser for cleaning Claude tool-call results before they become descriptions.

The model answers through a forced tool call, so results arrive as JSON
objects. This module pulls the description strings out of them and strips
decoration the model sometimes adds anyway: markdown code fences and JSDoc
comment markers.
"""

import re
from typing import Any, Dict, List, Optional


class ClaudeResponseParser:
    """Parse and clean Claude tool-call results.

    Every method returns None for a malformed result instead of raising, so
    callers can fall back to an empty placeholder.
    """

    # Supported language specifiers for markdown fences
    LANGUAGE_SPECIFIERS = [
        'javascript', 'js',
        'typescript', 'ts',
        'text', 'markdown', 'md'
    ]

    @staticmethod
    def strip_markdown_fences(response: str) -> str:
        """Remove a markdown code fence wrapper if present.

        Parameters
        ----------
        response : str
            Raw text from Claude

        Returns
        -------
        str
            Text without the outer fence; unchanged when there is none

        Examples
        --------
        >>> ClaudeResponseParser.strip_markdown_fences('```text\\nAdds two numbers.\\n```')
        'Adds two numbers.'
        """
        if not response:
            return response

        language_pattern = '|'.join(ClaudeResponseParser.LANGUAGE_SPECIFIERS)
        pattern = rf'^\s*```(?:{language_pattern})?\s*\n(.*?)\n```\s*$'

        match = re.match(pattern, response.strip(), re.DOTALL)
        if match:
            return match.group(1)
        return response

    @staticmethod
    def strip_comment_markers(text: str) -> str:
        """Remove '/**', '*/' and leading '*' from a JSDoc-shaped answer."""
        stripped = text.strip()
        if not (stripped.startswith('/*') or stripped.startswith('*')):
            return text
        stripped = re.sub(r'^/\*\*?', '', stripped)
        stripped = re.sub(r'\*/$', '', stripped)
        lines = [re.sub(r'^\s*\* ?', '', line) for line in stripped.splitlines()]
        return '\n'.join(lines).strip()

    @classmethod
    def clean(cls, text: str) -> str:
        """Fence and marker stripping plus per-line trimming.

        Blank lines are dropped, so each remaining line becomes one
        description line.
        """
        text = cls.strip_comment_markers(cls.strip_markdown_fences(text))
        return '\n'.join(line.strip() for line in text.splitlines() if line.strip())

    @classmethod
    def parse_description(cls, result: Optional[Dict[str, Any]]) -> Optional[str]:
        """Extract the 'description' string of a tool-call result.

        Parameters
        ----------
        result : dict or None
            Tool input returned by the client

        Returns
        -------
        str or None
            Cleaned description, or None when missing, empty or not a string
        """
        if not isinstance(result, dict):
            return None
        description = result.get('description')
        if not isinstance(description, str):
            return None
        return cls.clean(description) or None

    @classmethod
    def parse_parameter_descriptions(
        cls, result: Optional[Dict[str, Any]], names: List[str]
    ) -> Optional[List[str]]:
        """Extract per-name descriptions of a tool-call result.

        Parameters
        ----------
        result : dict or None
            Tool input returned by the client
        names : list of str
            Parameter names, in declaration order

        Returns
        -------
        list of str or None
            One description per name, in the order of ``names``; names the
            model left out map to ''. None when the result is malformed.
        """
        if not isinstance(result, dict):
            return None
        descriptions = result.get('descriptions')
        if not isinstance(descriptions, dict):
            return None
        parsed = []
        for name in names:
            value = descriptions.get(name)
            parsed.append(cls.clean(value) if isinstance(value, str) else '')
        return parsed
