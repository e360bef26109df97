from __future__ import annotations

from typing import List, Optional, Protocol

from src.templates.models import CodeTemplate, TemplateType


class TemplateStoreError(Exception):
    """Raised by a template store when it cannot serve a request."""


class TemplateStore(Protocol):
    """Storage abstraction for code-generation templates."""

    async def initialize(self) -> None:
        """One-time setup. Calling it again must be harmless."""
        ...

    def get_all_templates(self) -> List[CodeTemplate]:
        ...

    def get_templates_by_type(self, template_type: TemplateType) -> List[CodeTemplate]:
        ...

    def get_template(self, template_id: str) -> Optional[CodeTemplate]:
        ...

    async def save_custom_template(self, template: CodeTemplate) -> CodeTemplate:
        """
        Insert or update a custom template by id.
        Returns the template as persisted.
        """
        ...

    async def delete_custom_template(self, template_id: str) -> bool:
        """
        Returns False when the id is a built-in template or does not exist.
        """
        ...
