from .template_manager_tool import TemplateManagerTool
from .factory import build_template_manager_tool

__all__ = [
    "TemplateManagerTool",
    "build_template_manager_tool",
]
