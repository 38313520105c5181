"""Placeholder, static text and generative description sources."""

import logging
from typing import List, Optional

from ..claude.description_service import ClaudeDescriptionService
from ..config import GeneratorConfig
from ..models.declaration_kind import DeclarationKind
from ..models.header import Placeholder, Text
from ..models.syntax_node import SyntaxNode
from .base import DescriptionSource

logger = logging.getLogger(__name__)


class PlaceholderSource(DescriptionSource):
    """Leaves an empty editable region for every description."""

    async def describe_snippet(self, node: SyntaxNode, kind: DeclarationKind) -> Text:
        return Placeholder(self.constructor_text(node, kind) or "")


class StaticTextSource(DescriptionSource):
    """Describes every declaration with the same configured text."""

    def __init__(self, text: str, constructor_description: str = ""):
        super().__init__(constructor_description)
        self.text = text

    async def describe_snippet(self, node: SyntaxNode, kind: DeclarationKind) -> Text:
        return Placeholder(self.constructor_text(node, kind) or self.text)


class GenerativeSource(DescriptionSource):
    """Asks a generative description service for descriptions.

    The declaration description is always requested. Type parameter,
    parameter and return value descriptions are only requested when their
    flag is on. Failed, empty or malformed answers become empty
    placeholders.

    Args:
        service: Service answering the description requests.
        constructor_description: See DescriptionSource.
        describe_type_parameters: Request type parameter descriptions.
        describe_parameters: Request parameter descriptions.
        describe_returns: Request return value descriptions.
    """

    def __init__(
        self,
        service: ClaudeDescriptionService,
        constructor_description: str = "",
        describe_type_parameters: bool = False,
        describe_parameters: bool = False,
        describe_returns: bool = False,
    ):
        super().__init__(constructor_description)
        self.service = service
        self.describe_type_parameters = describe_type_parameters
        self.describe_parameter_names = describe_parameters
        self.describe_returns = describe_returns

    async def close(self) -> None:
        await self.service.close()

    @staticmethod
    def _source_text(node: SyntaxNode) -> str:
        return node.anchor.text

    async def describe_snippet(self, node: SyntaxNode, kind: DeclarationKind) -> Text:
        constructor_text = self.constructor_text(node, kind)
        if constructor_text:
            return Placeholder(constructor_text)
        try:
            description = await self.service.describe_snippet(self._source_text(node), kind.value)
        except Exception as e:
            logger.warning("Description generation failed for %s: %s", kind.value, e)
            return Placeholder()
        return Placeholder(description or "")

    async def describe_parameters(
        self, node: SyntaxNode, kind: DeclarationKind, generics: bool, names: List[str]
    ) -> List[Text]:
        enabled = self.describe_type_parameters if generics else self.describe_parameter_names
        if not enabled or not names:
            return [Placeholder() for _ in names]
        try:
            descriptions = await self.service.describe_parameters(
                self._source_text(node), kind.value, generics, names
            )
        except Exception as e:
            logger.warning("Parameter description generation failed for %s: %s", kind.value, e)
            descriptions = None
        descriptions = list(descriptions or [])
        descriptions += [""] * (len(names) - len(descriptions))
        return [Placeholder(text or "") for text in descriptions[: len(names)]]

    async def describe_return(self, node: SyntaxNode) -> Text:
        if not self.describe_returns:
            return Placeholder()
        try:
            description = await self.service.describe_return(self._source_text(node))
        except Exception as e:
            logger.warning("Return description generation failed: %s", e)
            return Placeholder()
        return Placeholder(description or "")


def select_description_source(
    config: GeneratorConfig, service: Optional[ClaudeDescriptionService] = None
) -> DescriptionSource:
    """Pick the description strategy for one invocation.

    A configured description placeholder takes precedence. Otherwise
    descriptions are generated when a service is given or an API key is
    available, and left as empty placeholders when not.

    Args:
        config: Generator settings.
        service: Service to use instead of one built from ``config``.

    Returns:
        The description source.
    """
    constructor_description = config.description_for_constructors
    if config.description_placeholder:
        return StaticTextSource(config.description_placeholder, constructor_description)
    if service is None:
        service = ClaudeDescriptionService.from_config(config)
    if service is None:
        logger.debug("No API key configured; descriptions left as placeholders")
        return PlaceholderSource(constructor_description)
    return GenerativeSource(
        service,
        constructor_description,
        describe_type_parameters=config.generate_description_for_type_parameters,
        describe_parameters=config.generate_description_for_parameters,
        describe_returns=config.generate_description_for_returns,
    )
