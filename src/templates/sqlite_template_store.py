from __future__ import annotations

import asyncio
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from src.templates.fixtures.templates import BUILTIN_TEMPLATES
from src.templates.models import CodeTemplate, TemplateType
from src.templates.store import TemplateStoreError


class SQLiteTemplateStore:
    """
    Built-in templates live in memory; custom templates persist in sqlite.
    - custom_templates: one row per template id, loaded into memory on initialize().
    Reads are served from memory, writes go to sqlite first.
    """

    def __init__(self, db_path: str, builtins: Optional[Iterable[Dict[str, Any]]] = None):
        self.db_path = db_path
        self._builtins: Dict[str, CodeTemplate] = {}
        for raw in BUILTIN_TEMPLATES if builtins is None else builtins:
            tpl = CodeTemplate.model_validate(raw)
            self._builtins[tpl.id] = tpl
        self._custom: Dict[str, CodeTemplate] = {}
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS custom_templates (
                    template_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL,
                    framework TEXT,
                    content TEXT NOT NULL,
                    description TEXT,
                    created_at TEXT NOT NULL DEFAULT (datetime('now')),
                    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
                );
                """
            )
            conn.commit()

    def _load_custom(self) -> Dict[str, CodeTemplate]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT template_id, name, type, framework, content, description
                FROM custom_templates
                ORDER BY rowid;
                """
            ).fetchall()

        loaded: Dict[str, CodeTemplate] = {}
        for row in rows:
            tpl = CodeTemplate(
                id=row["template_id"],
                name=row["name"],
                type=row["type"],
                framework=row["framework"],
                content=row["content"],
                description=row["description"],
            )
            loaded[tpl.id] = tpl
        return loaded

    def _upsert_row(self, tpl: CodeTemplate) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO custom_templates(template_id, name, type, framework, content, description, updated_at)
                VALUES(?, ?, ?, ?, ?, ?, datetime('now'))
                ON CONFLICT(template_id) DO UPDATE SET
                    name=excluded.name,
                    type=excluded.type,
                    framework=excluded.framework,
                    content=excluded.content,
                    description=excluded.description,
                    updated_at=datetime('now');
                """,
                (
                    tpl.id,
                    tpl.name,
                    tpl.type.value,
                    tpl.framework.value if tpl.framework else None,
                    tpl.content,
                    tpl.description,
                ),
            )
            conn.commit()

    def _delete_row(self, template_id: str) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM custom_templates WHERE template_id = ?;",
                (template_id,),
            )
            conn.commit()
            return cur.rowcount

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise TemplateStoreError("Template store has not been initialized")

    async def initialize(self) -> None:
        if self._initialized:
            return
        await asyncio.to_thread(self._init_schema)
        self._custom = await asyncio.to_thread(self._load_custom)
        self._initialized = True

    def get_all_templates(self) -> List[CodeTemplate]:
        self._require_initialized()
        return [*self._builtins.values(), *self._custom.values()]

    def get_templates_by_type(self, template_type: TemplateType) -> List[CodeTemplate]:
        template_type = TemplateType(template_type)
        return [tpl for tpl in self.get_all_templates() if tpl.type == template_type]

    def get_template(self, template_id: str) -> Optional[CodeTemplate]:
        self._require_initialized()
        if template_id in self._builtins:
            return self._builtins[template_id]
        return self._custom.get(template_id)

    def is_builtin(self, template_id: str) -> bool:
        return template_id in self._builtins

    async def save_custom_template(self, template: CodeTemplate) -> CodeTemplate:
        self._require_initialized()
        if self.is_builtin(template.id):
            raise TemplateStoreError(f"Cannot overwrite built-in template with ID: {template.id}")

        stored = template.model_copy(deep=True)
        await asyncio.to_thread(self._upsert_row, stored)
        # dict assignment keeps the original position on update
        self._custom[stored.id] = stored
        return stored.model_copy(deep=True)

    async def delete_custom_template(self, template_id: str) -> bool:
        self._require_initialized()
        if self.is_builtin(template_id):
            return False

        # claimed before the await so a concurrent delete of the same id sees it gone
        removed = self._custom.pop(template_id, None)
        if removed is None:
            return False

        try:
            await asyncio.to_thread(self._delete_row, template_id)
        except Exception:
            self._custom[template_id] = removed
            raise
        return True
