"""
Template manager tools: list, get, save and delete code-generation templates.

Every tool returns a single JSON text payload:
  {"success": true, "templates" | "template" | "message": ...}
  {"success": false, "error": "..."}
Nothing raised by the store crosses this boundary.
"""
from __future__ import annotations

import json
from typing import Any, List, Literal, MutableMapping, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field, ValidationError

from src.templates.models import CodeTemplate, FrameworkType, TemplateType
from src.templates.store import TemplateStore
from src.tools.lifecycle import StoreLifecycle
from src.utils.logging import ecid_scope

TEMPLATE_LIST_TOOL_NAME = "template-list"
TEMPLATE_LIST_TOOL_DESCRIPTION = "Get available code generation template list"

TEMPLATE_GET_TOOL_NAME = "template-get"
TEMPLATE_GET_TOOL_DESCRIPTION = "Get specific template content"

TEMPLATE_SAVE_TOOL_NAME = "template-save"
TEMPLATE_SAVE_TOOL_DESCRIPTION = "Save or update template"

TEMPLATE_DELETE_TOOL_NAME = "template-delete"
TEMPLATE_DELETE_TOOL_DESCRIPTION = "Delete custom template"


# ----------------------------
# Argument schemas
# ----------------------------
class ListTemplatesParams(BaseModel):
    type: Optional[Literal["all", "api-client", "typescript-types", "config-file"]] = Field(
        None, description="Template type filter"
    )
    framework: Optional[FrameworkType] = Field(
        None, description="Framework type filter (only for API client and config file templates)"
    )
    includeContent: Optional[bool] = Field(None, description="Whether to include template content")


class GetTemplateParams(BaseModel):
    id: str = Field(..., description="Template ID")


class SaveTemplateParams(BaseModel):
    id: str = Field(..., description="Template ID")
    name: str = Field(..., description="Template name")
    type: TemplateType = Field(..., description="Template type")
    framework: Optional[FrameworkType] = Field(
        None, description="Framework type (only for API client and config file templates)"
    )
    content: str = Field(..., description="Template content")
    description: Optional[str] = Field(None, description="Template description")


class DeleteTemplateParams(BaseModel):
    id: str = Field(..., description="Template ID")


def success(**payload: Any) -> str:
    return json.dumps({"success": True, **payload}, indent=2, ensure_ascii=False)


def failure(error: str) -> str:
    return json.dumps({"success": False, "error": error}, indent=2, ensure_ascii=False)


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class TemplateManagerTool:
    """Routes the four template tools to a TemplateStore."""

    def __init__(self, store: TemplateStore, logger):
        self.store = store
        self.logger = logger
        self.lifecycle = StoreLifecycle(store)

    # ----------------------------
    # Registration
    # ----------------------------
    def as_tools(self) -> List[BaseTool]:
        async def list_tool(**kwargs: Any) -> str:
            return await self.list_templates(ListTemplatesParams(**kwargs))

        async def get_tool(**kwargs: Any) -> str:
            return await self.get_template(GetTemplateParams(**kwargs))

        async def save_tool(**kwargs: Any) -> str:
            return await self.save_template(SaveTemplateParams(**kwargs))

        async def delete_tool(**kwargs: Any) -> str:
            return await self.delete_template(DeleteTemplateParams(**kwargs))

        specs = [
            (TEMPLATE_LIST_TOOL_NAME, TEMPLATE_LIST_TOOL_DESCRIPTION, ListTemplatesParams, list_tool),
            (TEMPLATE_GET_TOOL_NAME, TEMPLATE_GET_TOOL_DESCRIPTION, GetTemplateParams, get_tool),
            (TEMPLATE_SAVE_TOOL_NAME, TEMPLATE_SAVE_TOOL_DESCRIPTION, SaveTemplateParams, save_tool),
            (TEMPLATE_DELETE_TOOL_NAME, TEMPLATE_DELETE_TOOL_DESCRIPTION, DeleteTemplateParams, delete_tool),
        ]
        return [
            StructuredTool.from_function(
                coroutine=coroutine,
                name=name,
                description=description,
                args_schema=schema,
                handle_validation_error=self._invalid_params,
            )
            for name, description, schema, coroutine in specs
        ]

    async def register(self, registry: MutableMapping[str, BaseTool]) -> List[BaseTool]:
        """Initialize the store up front and add the tools to `registry` by name."""
        await self.lifecycle.ensure_ready()

        tools = self.as_tools()
        for tool in tools:
            registry[tool.name] = tool

        self.logger.info(f"Registered template manager tools: {', '.join(t.name for t in tools)}")
        return tools

    def _invalid_params(self, exc: ValidationError) -> str:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()
        )
        self.logger.warning(f"[TemplateManagerTool] rejected parameters: {problems}")
        return failure(f"Invalid parameters: {problems}")

    # ----------------------------
    # Operations
    # ----------------------------
    async def list_templates(self, params: ListTemplatesParams) -> str:
        with ecid_scope():
            try:
                await self.lifecycle.ensure_ready()

                if params.type and params.type != "all":
                    templates = self.store.get_templates_by_type(TemplateType(params.type))
                else:
                    templates = self.store.get_all_templates()

                # applied whenever supplied, whatever the type filter
                if params.framework:
                    templates = [t for t in templates if t.framework == params.framework]

                include_content = bool(params.includeContent)
                self.logger.debug(
                    f"[TemplateManagerTool] list type={params.type} framework={params.framework} "
                    f"include_content={include_content} -> {len(templates)} templates"
                )
                return success(templates=[t.to_payload(include_content=include_content) for t in templates])
            except Exception as e:
                self.logger.error(f"[TemplateManagerTool] Failed to list templates: {e}", exc_info=True)
                return failure(_error_text(e))

    async def get_template(self, params: GetTemplateParams) -> str:
        with ecid_scope():
            try:
                await self.lifecycle.ensure_ready()

                template = self.store.get_template(params.id)
                if template is None:
                    self.logger.debug(f"[TemplateManagerTool] template not found: {params.id!r}")
                    return failure(f"Template not found with ID: {params.id}")

                return success(template=template.to_payload())
            except Exception as e:
                self.logger.error(f"[TemplateManagerTool] Failed to get template: {e}", exc_info=True)
                return failure(_error_text(e))

    async def save_template(self, params: SaveTemplateParams) -> str:
        with ecid_scope():
            try:
                await self.lifecycle.ensure_ready()

                template = CodeTemplate(
                    id=params.id,
                    name=params.name,
                    type=params.type,
                    framework=params.framework,
                    content=params.content,
                    description=params.description,
                )
                stored = await self.store.save_custom_template(template)

                self.logger.info(f"[TemplateManagerTool] saved template {stored.id!r}")
                return success(template=stored.to_payload())
            except Exception as e:
                self.logger.error(f"[TemplateManagerTool] Failed to save template: {e}", exc_info=True)
                return failure(_error_text(e))

    async def delete_template(self, params: DeleteTemplateParams) -> str:
        with ecid_scope():
            try:
                await self.lifecycle.ensure_ready()

                deleted = await self.store.delete_custom_template(params.id)
                if not deleted:
                    return failure(
                        f"Failed to delete template with ID: {params.id}. "
                        "It may be a built-in template or not exist."
                    )

                self.logger.info(f"[TemplateManagerTool] deleted template {params.id!r}")
                return success(message=f"Template with ID: {params.id} has been deleted.")
            except Exception as e:
                self.logger.error(f"[TemplateManagerTool] Failed to delete template: {e}", exc_info=True)
                return failure(_error_text(e))
