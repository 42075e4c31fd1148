from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from . import diagnostics
from .config import RuleConfigBase, build_config
from .models import Category, RuleResult, TemplateName
from .normalize import DecodedDataset, FieldSpec, decode_rows, ensure_dataset
from .settings import get_settings


class Rule(ABC):
    """A compliance test over one or more template datasets.

    `run` is the only entry point callers use: it checks the input shape,
    builds the config and turns any crash into a single error entry, so a
    rule never raises to its caller. Subclasses implement `evaluate`.
    """

    rule_id: str
    name: str
    description: str
    category: Category
    config_model: Type[RuleConfigBase]
    required_templates: Tuple[TemplateName, ...]
    fields: Tuple[FieldSpec, ...] = ()

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Rule must define rule_id")
        if not getattr(self, "required_templates", None):
            raise ValueError(f"{self.rule_id}: rule must declare required_templates")

    @property
    def primary_template(self) -> TemplateName:
        return self.required_templates[0]

    @property
    def multi_template(self) -> bool:
        return len(self.required_templates) > 1

    def default_config(self) -> RuleConfigBase:
        return self.config_model()

    def render_description(self, cfg: Optional[RuleConfigBase] = None) -> str:
        values = (cfg or self.default_config()).model_dump(mode="json")
        return self.description.format_map(_Placeholders(values))

    def run(self, data: Any, config: Optional[Mapping[str, Any] | BaseModel] = None) -> RuleResult:
        shape_issue = self._check_shape(data)
        if shape_issue is not None:
            return RuleResult.fatal(self.rule_id, shape_issue)

        try:
            cfg = build_config(self.config_model, config)
        except ValidationError as exc:
            return RuleResult.fatal(self.rule_id, f"Invalid configuration: {_describe(exc)}")

        try:
            return self.evaluate(data, cfg)
        except Exception as exc:
            diagnostics.log(f"Error processing {self.name} data in {self.rule_id}", type="error", data=exc)
            return RuleResult.fatal(self.rule_id, f"Error processing {self.name} data: {exc}")

    @abstractmethod
    def evaluate(self, data: Any, cfg: Any) -> RuleResult:  # pragma: no cover
        raise NotImplementedError

    def decode(
        self,
        data: Any,
        cfg: RuleConfigBase,
        fields: Optional[Tuple[FieldSpec, ...]] = None,
        *,
        label: Optional[str] = None,
    ) -> DecodedDataset:
        # Dates without a time or offset are read as calendar days in the rule timezone.
        return decode_rows(data, self.fields if fields is None else fields, label=label, tz=self.timezone(cfg))

    def timezone(self, cfg: RuleConfigBase) -> str:
        return cfg.timezone or get_settings().default_timezone

    def _check_shape(self, data: Any) -> Optional[str]:
        if not self.multi_template:
            issue = ensure_dataset(data)
            return issue.message if issue else None
        if not isinstance(data, Mapping):
            return "Data must be a mapping of template name to dataset"
        for template in self.required_templates:
            issue = ensure_dataset(template_dataset(data, template), template.value)
            if issue is not None:
                return issue.message
        return None


def template_dataset(data: Mapping[Any, Any], template: TemplateName) -> Any:
    """Look a dataset up by template name, whether keyed by the enum or its label."""
    if template.value in data:
        return data[template.value]
    return data.get(template)


class _Placeholders(Dict[str, Any]):
    # Unknown tokens are left in place rather than failing the render.
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", ""))
    return "; ".join(parts)
