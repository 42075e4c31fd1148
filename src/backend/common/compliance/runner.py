from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from .config import ClientRulesConfig, build_config
from .errors import RuleExecutionError
from .models import RuleOutcome, RunReport, RunStatus
from .registry import RegistryEntry, RuleRegistry, registry
from .rule import template_dataset

logger = logging.getLogger(__name__)


class RulesRunner:
    """Runs registered rules over a set of uploaded template datasets.

    A rule whose templates are missing or empty is SKIPPED. A rule that
    reports a fatal error is FAILED, unless `raise_on_error` is set, in
    which case the run stops with `RuleExecutionError`.
    """

    def __init__(self, rule_registry: Optional[RuleRegistry] = None):
        self._registry = rule_registry if rule_registry is not None else registry

    def run(
        self,
        datasets: Mapping[Any, Any],
        *,
        rule_ids: Optional[Iterable[str]] = None,
        client_config: Optional[ClientRulesConfig] = None,
        raise_on_error: bool = False,
    ) -> RunReport:
        client_config = client_config or ClientRulesConfig()
        outcomes = [
            self._run_entry(entry, datasets, client_config, raise_on_error)
            for entry in self._select(rule_ids)
        ]

        totals: dict[RunStatus, int] = {}
        for outcome in outcomes:
            totals[outcome.status] = totals.get(outcome.status, 0) + 1

        report = RunReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            outcomes=outcomes,
            totals=totals,
        )
        logger.info(
            "Compliance run %s finished: %s",
            report.run_id,
            ", ".join(f"{status.value}={count}" for status, count in totals.items()) or "no rules",
        )
        return report

    def _select(self, rule_ids: Optional[Iterable[str]]) -> list[RegistryEntry]:
        if rule_ids is None:
            return self._registry.entries()
        selected: list[RegistryEntry] = []
        for rule_id in rule_ids:
            entry = self._registry.get(rule_id)
            if entry not in selected:
                selected.append(entry)
        return selected

    def _run_entry(
        self,
        entry: RegistryEntry,
        datasets: Mapping[Any, Any],
        client_config: ClientRulesConfig,
        raise_on_error: bool,
    ) -> RuleOutcome:
        missing = [t.value for t in entry.required_templates if not template_dataset(datasets, t)]
        if missing:
            logger.info("Skipping %s: no data for %s", entry.id, ", ".join(missing))
            return RuleOutcome(
                rule_id=entry.id,
                status=RunStatus.SKIPPED,
                reason=f"Missing template data: {', '.join(missing)}",
            )

        overrides = client_config.overrides_for(entry.id)
        try:
            cfg = build_config(entry.rule.config_model, overrides)
            config_used = cfg.model_dump(mode="json")
            config_arg: Any = cfg
        except ValidationError:
            # Let the rule report the invalid configuration itself.
            config_used = overrides
            config_arg = overrides

        if entry.rule.multi_template:
            data: Any = {t.value: template_dataset(datasets, t) for t in entry.required_templates}
        else:
            data = template_dataset(datasets, entry.rule.primary_template)

        result = entry.rule.run(data, config_arg)
        if result.failed:
            messages = [issue.message for issue in result.errors]
            if raise_on_error:
                raise RuleExecutionError(entry.id, messages)
            logger.warning("Rule %s failed: %s", entry.id, "; ".join(messages))
            return RuleOutcome(
                rule_id=entry.id,
                status=RunStatus.FAILED,
                config=config_used,
                result=result,
                reason="; ".join(messages),
            )

        logger.info(
            "Rule %s completed: %d findings, %d row issues",
            entry.id,
            len(result.summary),
            len(result.errors),
        )
        return RuleOutcome(rule_id=entry.id, status=RunStatus.COMPLETED, config=config_used, result=result)
