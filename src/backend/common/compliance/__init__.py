"""Compliance tests over uploaded client ledgers.

Rules take template datasets (lists of label->value records) plus a typed
config and return `{results, summary, errors}`. Nothing here touches
storage, uploads or the network.
"""

from .config import ClientRulesConfig
from .errors import ComplianceError, RuleExecutionError, UnknownRuleError
from .models import (
    RuleOutcome,
    RuleResult,
    RunReport,
    RunStatus,
    SummaryEntry,
    TemplateName,
    ValidationIssue,
)
from .registry import RegistryEntry, registry
from .runner import RulesRunner

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
