from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TemplateType(str, Enum):
    API_CLIENT = "api-client"
    TYPESCRIPT_TYPES = "typescript-types"
    CONFIG_FILE = "config-file"


class FrameworkType(str, Enum):
    AXIOS = "axios"
    FETCH = "fetch"
    REACT_QUERY = "react-query"
    SWR = "swr"
    ANGULAR = "angular"
    VUE = "vue"


class CodeTemplate(BaseModel):
    """
    A named, typed unit of reusable generated-code text.
    `framework` only carries meaning for api-client and config-file templates.
    """

    id: str = Field(..., description="Template ID")
    name: str = Field(..., description="Template name")
    type: TemplateType = Field(..., description="Template type")
    framework: Optional[FrameworkType] = Field(
        None,
        description="Framework type (only for API client and config file templates)",
    )
    content: str = Field(..., description="Template content")
    description: Optional[str] = Field(None, description="Template description")

    def to_payload(self, include_content: bool = True) -> Dict[str, Any]:
        # None fields are omitted from the wire format, not sent as null
        exclude = None if include_content else {"content"}
        return self.model_dump(mode="json", exclude_none=True, exclude=exclude)
