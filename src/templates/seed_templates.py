from __future__ import annotations

import argparse
import asyncio
import json
from typing import List, Optional, Sequence

from src.templates.models import CodeTemplate
from src.templates.sqlite_template_store import SQLiteTemplateStore


def load_templates(path: str) -> List[CodeTemplate]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of templates")
    return [CodeTemplate.model_validate(item) for item in data]


async def seed(db_path: str, templates: List[CodeTemplate]) -> int:
    store = SQLiteTemplateStore(db_path)
    await store.initialize()
    for tpl in templates:
        await store.save_custom_template(tpl)
    return len(templates)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--db", required=True, help="Path to sqlite db file, e.g. data/templates.db")
    parser.add_argument("--file", required=True, help="JSON file holding a list of custom templates")
    args = parser.parse_args(argv)

    count = asyncio.run(seed(args.db, load_templates(args.file)))

    print(f"Seeded {count} templates into {args.db}")
    return count


if __name__ == "__main__":
    main()
