"""
Prompt builder for JSDoc description requests.

This module builds the system prompt, the user message and the
``generate_jsdoc`` tool definition for each of the three description
requests: the declaration itself, its (type) parameters, and its return
value.
"""

from typing import Any, Dict, List

TOOL_NAME = "generate_jsdoc"
SYSTEM_PROMPT = "You are a TypeScript description generator"

# Kinds whose description should not cover members
KINDS_WITHOUT_MEMBERS = ("function", "enum")


class PromptBuilder:
    """
    Builder for description prompts and tool schemas.

    Parameters
    ----------
    language : str, optional
        Natural language the descriptions are written in. Defaults to 'English'.
    """

    def __init__(self, language: str = "English"):
        if not language or not language.strip():
            raise ValueError("Description language must not be empty")
        self.language = language.strip()

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_prompt(self, code: str, kind: str) -> str:
        """
        Build the user message for a declaration.

        Parameters
        ----------
        code : str
            Source text of the declaration.
        kind : str
            Declaration kind name: 'class', 'function', 'property', ...

        Returns
        -------
        str
            The message to send to Claude.
        """
        return f"Generate the JSDoc for this {kind} in {self.language}:\n{code.strip()}"

    def snippet_tool(self, kind: str) -> Dict[str, Any]:
        """Tool definition for the description of a declaration."""
        excluded = "" if kind in KINDS_WITHOUT_MEMBERS else "attributes, methods, or "
        return {
            "name": TOOL_NAME,
            "description": (
                f"Given the {kind} textual (no tags) description in {self.language}, "
                f"generates its JSDoc"
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "description": {
                        "type": "string",
                        "description": (
                            f"The {kind} description in {self.language}, without tags and no "
                            f"{excluded}parameters or type parameters description. "
                            f"Each sentence on a new line."
                        ),
                    }
                },
                "required": ["description"],
            },
        }

    def parameters_tool(self, names: List[str], generics: bool) -> Dict[str, Any]:
        """Tool definition for a batch of (type) parameter descriptions."""
        label = "type parameter" if generics else "parameter"
        return {
            "name": TOOL_NAME,
            "description": (
                f"Given the {label}s textual descriptions in {self.language}, generates its JSDoc"
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "descriptions": {
                        "type": "object",
                        "description": (
                            f"A record of <{label} name, description in {self.language}> pairs"
                        ),
                        "properties": {
                            name: {
                                "type": "string",
                                "description": (
                                    f"Textual description in {self.language} for the {name} {label}"
                                ),
                            }
                            for name in names
                        },
                    }
                },
                "required": ["descriptions"],
            },
        }

    def return_tool(self) -> Dict[str, Any]:
        """Tool definition for the description of a return value."""
        return {
            "name": TOOL_NAME,
            "description": (
                f"Given the function return value textual description in {self.language}, "
                f"generates its JSDoc"
            ),
            "input_schema": {
                "type": "object",
                "properties": {
                    "description": {
                        "type": "string",
                        "description": f"The return value description in {self.language}",
                    }
                },
                "required": ["description"],
            },
        }
