from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from common.compliance import ClientRulesConfig, RulesRunner, TemplateName, UnknownRuleError
from common.compliance.catalog import build_catalog


router = APIRouter(prefix="/compliance", tags=["compliance"])

_TEMPLATE_NAMES = {t.value for t in TemplateName}


class AnalysisRequest(BaseModel):
    # Template label -> uploaded rows, already mapped to template column labels.
    datasets: Dict[str, Any] = Field(default_factory=dict)
    rule_ids: Optional[List[str]] = None
    config: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


def _require_templates(names: List[str]) -> None:
    unknown = sorted(set(names) - _TEMPLATE_NAMES)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown template(s): {', '.join(unknown)}")


@router.get("/tests")
def list_compliance_tests(template: Optional[List[str]] = Query(None)):
    if template:
        _require_templates(template)
    return [entry.model_dump(mode="json") for entry in build_catalog(template)]


@router.post("/analyses")
def run_compliance_analysis(request: AnalysisRequest):
    _require_templates(list(request.datasets))
    try:
        report = RulesRunner().run(
            request.datasets,
            rule_ids=request.rule_ids,
            client_config=ClientRulesConfig(rules=request.config),
        )
    except UnknownRuleError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None
    return report.model_dump(mode="json")
