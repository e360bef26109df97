from __future__ import annotations

import logging
import os
from typing import Optional

from src.templates.sqlite_template_store import SQLiteTemplateStore
from src.tools.template_manager_tool import TemplateManagerTool
from src.utils.logging import setup_logging
from src.utils.settings import Settings, settings as default_settings


def build_template_manager_tool(settings: Optional[Settings] = None) -> TemplateManagerTool:
    settings = settings or default_settings
    logger = setup_logging(level=getattr(logging, settings.LOG_LEVEL))

    db_dir = os.path.dirname(settings.TEMPLATE_DB_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    store = SQLiteTemplateStore(settings.TEMPLATE_DB_PATH)
    logger.info(f"Template store at {settings.TEMPLATE_DB_PATH}")
    return TemplateManagerTool(store, logger)
