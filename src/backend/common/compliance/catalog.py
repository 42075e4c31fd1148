from __future__ import annotations

import argparse
import json
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from .models import TemplateName
from .registry import registry

# Ensure built-in rules are imported/registered when generating a catalog.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    id: str
    name: str
    description: str
    category: str
    required_templates: List[str] = Field(default_factory=list)

    module: str
    class_name: str

    default_config: Dict[str, Any] = Field(default_factory=dict)
    config_model: str
    config_schema: Dict[str, Any]


def build_catalog(templates: Optional[Iterable[TemplateName | str]] = None) -> List[RuleCatalogEntry]:
    """Describe every registered rule, optionally only those runnable with `templates`."""
    selected = registry.entries() if templates is None else registry.available_for(templates)
    entries: List[RuleCatalogEntry] = []
    for entry in selected:
        cfg_model = entry.rule.config_model
        entries.append(
            RuleCatalogEntry(
                id=entry.id,
                name=entry.name,
                description=entry.description,
                category=entry.category,
                required_templates=[t.value for t in entry.required_templates],
                module=type(entry.rule).__module__,
                class_name=type(entry.rule).__name__,
                default_config=entry.rule.default_config().model_dump(mode="json"),
                config_model=cfg_model.__name__,
                config_schema=cfg_model.model_json_schema(),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    import yaml

    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a compliance test catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    parser.add_argument(
        "--template",
        action="append",
        choices=[t.value for t in TemplateName],
        help="Only list tests runnable with these uploaded templates (repeatable).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump(mode="json") for e in build_catalog(args.template)]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
