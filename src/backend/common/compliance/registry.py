from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type

from .errors import UnknownRuleError
from .models import Category, TemplateName
from .rule import Rule


@dataclass(frozen=True)
class RegistryEntry:
    id: str
    name: str
    description: str
    category: str
    # Read-only view of the JSON-mode defaults; lists are stored as tuples.
    default_config: Mapping[str, Any]
    rule: Rule
    required_templates: Tuple[TemplateName, ...]


class RuleRegistry:
    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}

    def register(self, rule_cls: Type[Rule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError("Rule class missing rule_id")
        if rule_id in self._entries:
            raise ValueError(f"Duplicate rule_id registered: {rule_id}")
        rule = rule_cls()
        self._entries[rule_id] = RegistryEntry(
            id=rule_id,
            name=rule.name,
            description=rule.render_description(),
            category=Category(rule.category).value,
            default_config=_freeze(rule.default_config().model_dump(mode="json")),
            rule=rule,
            required_templates=tuple(rule.required_templates),
        )

    def get(self, rule_id: str) -> RegistryEntry:
        try:
            return self._entries[rule_id]
        except KeyError:
            raise UnknownRuleError(rule_id) from None

    def entries(self) -> List[RegistryEntry]:
        return list(self._entries.values())

    def ids(self) -> Iterable[str]:
        return self._entries.keys()

    def available_for(self, templates: Iterable[TemplateName | str]) -> List[RegistryEntry]:
        """Entries whose required templates are all in `templates`."""
        present = {TemplateName(t) for t in templates}
        return [e for e in self._entries.values() if set(e.required_templates) <= present]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


registry = RuleRegistry()


def register_rule(rule_cls: Type[Rule]) -> Type[Rule]:
    registry.register(rule_cls)
    return rule_cls
