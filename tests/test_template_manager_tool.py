import asyncio
import json

import pytest

from src.templates.models import CodeTemplate, TemplateType
from src.templates.sqlite_template_store import SQLiteTemplateStore
from src.utils.logging import ecid_var
from src.tools.template_manager_tool import (
    GetTemplateParams,
    TemplateManagerTool,
)


class DummyLogger:
    def __init__(self):
        self.errors = []
        self.warnings = []

    def debug(self, *args, **kwargs): pass
    def info(self, *args, **kwargs): pass
    def warning(self, msg, *args, **kwargs): self.warnings.append(msg)
    def error(self, msg, *args, **kwargs): self.errors.append(msg)


BUILTINS = [
    {"id": "b-axios", "name": "Axios", "type": "api-client", "framework": "axios", "content": "AX"},
    {"id": "b-fetch", "name": "Fetch", "type": "api-client", "framework": "fetch", "content": "FE"},
    {"id": "b-types", "name": "Types", "type": "typescript-types", "content": "TY"},
    {"id": "b-config", "name": "Config", "type": "config-file", "framework": "axios", "content": "CF"},
]


class InMemoryTemplateStore:
    """Test double matching the TemplateStore protocol."""

    def __init__(self, builtins=BUILTINS):
        self.builtins = {t["id"]: CodeTemplate.model_validate(t) for t in builtins}
        self.custom = {}
        self.init_calls = 0

    async def initialize(self):
        self.init_calls += 1
        await asyncio.sleep(0)

    def get_all_templates(self):
        return [*self.builtins.values(), *self.custom.values()]

    def get_templates_by_type(self, template_type):
        return [t for t in self.get_all_templates() if t.type == template_type]

    def get_template(self, template_id):
        return self.builtins.get(template_id) or self.custom.get(template_id)

    async def save_custom_template(self, template):
        self.custom[template.id] = template
        return template

    async def delete_custom_template(self, template_id):
        return self.custom.pop(template_id, None) is not None


class ExplodingStore(InMemoryTemplateStore):
    def get_all_templates(self):
        raise RuntimeError("store is corrupted")

    async def save_custom_template(self, template):
        raise OSError("disk full")


def make_tools(store=None, logger=None):
    manager = TemplateManagerTool(store or InMemoryTemplateStore(), logger or DummyLogger())
    return manager, {t.name: t for t in manager.as_tools()}


async def call(tools, name, args):
    return json.loads(await tools[name].ainvoke(args))


def test_as_tools_exposes_four_named_tools():
    _, tools = make_tools()
    assert set(tools) == {"template-list", "template-get", "template-save", "template-delete"}
    assert "includeContent" in tools["template-list"].args
    assert tools["template-get"].description == "Get specific template content"


@pytest.mark.asyncio
async def test_list_omits_content_by_default():
    _, tools = make_tools()

    out = await call(tools, "template-list", {})

    assert out["success"] is True
    assert [t["id"] for t in out["templates"]] == ["b-axios", "b-fetch", "b-types", "b-config"]
    assert all("content" not in t for t in out["templates"])


@pytest.mark.asyncio
async def test_list_include_content_returns_original_content():
    _, tools = make_tools()

    out = await call(tools, "template-list", {"includeContent": True})

    assert [t["content"] for t in out["templates"]] == ["AX", "FE", "TY", "CF"]


@pytest.mark.asyncio
async def test_list_filters_by_type_and_framework():
    _, tools = make_tools()

    out = await call(tools, "template-list", {"type": "api-client", "framework": "axios"})
    assert [t["id"] for t in out["templates"]] == ["b-axios"]

    out = await call(tools, "template-list", {"type": "all", "framework": "axios"})
    assert [t["id"] for t in out["templates"]] == ["b-axios", "b-config"]

    out = await call(tools, "template-list", {"type": "config-file"})
    assert [t["id"] for t in out["templates"]] == ["b-config"]


@pytest.mark.asyncio
async def test_list_framework_filter_applies_to_any_type():
    _, tools = make_tools()

    out = await call(tools, "template-list", {"type": "typescript-types", "framework": "axios"})

    assert out == {"success": True, "templates": []}


@pytest.mark.asyncio
async def test_list_rejects_unknown_type():
    logger = DummyLogger()
    _, tools = make_tools(logger=logger)

    out = await call(tools, "template-list", {"type": "graphql"})

    assert out["success"] is False
    assert out["error"].startswith("Invalid parameters: ")
    assert logger.warnings


@pytest.mark.asyncio
async def test_get_returns_full_template():
    _, tools = make_tools()

    out = await call(tools, "template-get", {"id": "b-types"})

    assert out == {
        "success": True,
        "template": {"id": "b-types", "name": "Types", "type": "typescript-types", "content": "TY"},
    }


@pytest.mark.asyncio
async def test_get_missing_template_is_failure_envelope():
    logger = DummyLogger()
    _, tools = make_tools(logger=logger)

    out = await call(tools, "template-get", {"id": "nope"})

    assert out == {"success": False, "error": "Template not found with ID: nope"}
    assert logger.errors == []


@pytest.mark.asyncio
async def test_save_then_get_round_trip():
    _, tools = make_tools()
    args = {"id": "t1", "name": "Axios Client", "type": "api-client", "framework": "axios", "content": "..."}

    saved = await call(tools, "template-save", args)
    got = await call(tools, "template-get", {"id": "t1"})

    assert saved["success"] is True
    assert got["success"] is True
    assert got["template"]["framework"] == "axios"
    assert got["template"] == saved["template"] == args


@pytest.mark.asyncio
async def test_save_twice_is_idempotent():
    store = InMemoryTemplateStore()
    _, tools = make_tools(store)
    args = {"id": "c1", "name": "C", "type": "config-file", "content": "x", "description": "d"}

    await call(tools, "template-save", args)
    first = store.get_all_templates()
    await call(tools, "template-save", args)

    assert store.get_all_templates() == first


@pytest.mark.asyncio
async def test_save_requires_concrete_type():
    _, tools = make_tools()

    out = await call(tools, "template-save", {"id": "x", "name": "X", "type": "all", "content": "c"})

    assert out["success"] is False
    assert "type" in out["error"]


@pytest.mark.asyncio
async def test_delete_builtin_is_refused_and_store_unchanged():
    store = InMemoryTemplateStore()
    _, tools = make_tools(store)
    before = store.get_all_templates()

    out = await call(tools, "template-delete", {"id": "b-axios"})

    assert out == {
        "success": False,
        "error": "Failed to delete template with ID: b-axios. It may be a built-in template or not exist.",
    }
    assert store.get_all_templates() == before


@pytest.mark.asyncio
async def test_delete_custom_then_get_fails():
    _, tools = make_tools()
    await call(tools, "template-save", {"id": "c1", "name": "C", "type": "config-file", "content": "x"})

    out = await call(tools, "template-delete", {"id": "c1"})
    got = await call(tools, "template-get", {"id": "c1"})

    assert out == {"success": True, "message": "Template with ID: c1 has been deleted."}
    assert got == {"success": False, "error": "Template not found with ID: c1"}


@pytest.mark.asyncio
async def test_store_faults_become_failure_envelopes():
    logger = DummyLogger()
    _, tools = make_tools(ExplodingStore(), logger)

    listed = await call(tools, "template-list", {})
    saved = await call(tools, "template-save", {"id": "x", "name": "X", "type": "api-client", "content": "c"})

    assert listed == {"success": False, "error": "store is corrupted"}
    assert saved == {"success": False, "error": "disk full"}
    assert len(logger.errors) == 2


@pytest.mark.asyncio
async def test_concurrent_first_calls_initialize_once():
    store = InMemoryTemplateStore()
    manager, _ = make_tools(store)

    await asyncio.gather(*(manager.get_template(GetTemplateParams(id="b-axios")) for _ in range(10)))
    await manager.get_template(GetTemplateParams(id="b-axios"))

    assert store.init_calls == 1
    assert manager.lifecycle.is_ready


@pytest.mark.asyncio
async def test_register_initializes_and_fills_registry():
    store = InMemoryTemplateStore()
    manager, _ = make_tools(store)
    registry = {}

    await manager.register(registry)

    assert store.init_calls == 1
    assert sorted(registry) == ["template-delete", "template-get", "template-list", "template-save"]
    out = json.loads(await registry["template-list"].ainvoke({"type": "typescript-types"}))
    assert [t["id"] for t in out["templates"]] == ["b-types"]
    assert store.init_calls == 1


@pytest.mark.asyncio
async def test_tools_against_sqlite_store(tmp_path):
    _, tools = make_tools(SQLiteTemplateStore(str(tmp_path / "t.db")))

    refused = await call(tools, "template-save", {"id": "axios-client", "name": "X", "type": "api-client", "content": "c"})
    saved = await call(tools, "template-save", {"id": "mine", "name": "Mine", "type": "typescript-types", "content": "c"})
    listed = await call(tools, "template-list", {"type": TemplateType.TYPESCRIPT_TYPES.value})

    assert refused == {"success": False, "error": "Cannot overwrite built-in template with ID: axios-client"}
    assert saved["success"] is True
    assert "mine" in [t["id"] for t in listed["templates"]]


@pytest.mark.asyncio
async def test_concurrent_deletes_of_same_template(tmp_path):
    _, tools = make_tools(SQLiteTemplateStore(str(tmp_path / "t.db")))
    await call(tools, "template-save", {"id": "c1", "name": "C", "type": "config-file", "content": "x"})

    results = await asyncio.gather(
        call(tools, "template-delete", {"id": "c1"}),
        call(tools, "template-delete", {"id": "c1"}),
    )

    assert sorted(r["success"] for r in results) == [False, True]
    assert {"success": True, "message": "Template with ID: c1 has been deleted."} in results
    assert {
        "success": False,
        "error": "Failed to delete template with ID: c1. It may be a built-in template or not exist.",
    } in results
    got = await call(tools, "template-get", {"id": "c1"})
    assert got == {"success": False, "error": "Template not found with ID: c1"}


class EcidLogger(DummyLogger):
    def __init__(self):
        super().__init__()
        self.ecids = []

    def debug(self, *args, **kwargs):
        self.ecids.append(ecid_var.get())


@pytest.mark.asyncio
async def test_correlation_id_is_scoped_to_each_call():
    logger = EcidLogger()
    manager, _ = make_tools(logger=logger)

    await manager.get_template(GetTemplateParams(id="missing-1"))
    await manager.get_template(GetTemplateParams(id="missing-2"))

    assert len(logger.ecids) == 2
    assert "-" not in logger.ecids
    assert logger.ecids[0] != logger.ecids[1]
    assert ecid_var.get() == "-"
