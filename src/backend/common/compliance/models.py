from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

Record = Mapping[str, Any]


class TemplateName(str, Enum):
    GENERAL_LEDGER = "General Ledger"
    TRIAL_BALANCE = "Trial Balance"
    SALES_REGISTER = "Sales Register"
    PURCHASE_REGISTER = "Purchase Register"
    CUSTOMER_LISTING = "Customer Listing"
    VENDORS = "Vendors"
    PAY_REGISTER = "Pay Register"
    FIXED_ASSETS_REGISTER = "Fixed Assets Register"
    INVENTORY_REGISTER = "Inventory Register"


class Category(str, Enum):
    MANAGEMENT_OVERRIDE = "Potential Management Override of Control Analytics"
    REVENUE = "Revenue Analytics"
    PURCHASES = "Purchases Analytics"
    PAY_DATA = "Pay Data Analytics"
    CUSTOMERS = "Customers Analytics"
    FIXED_ASSETS = "Fixed Assets Analytics"


class RunStatus(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class ValidationIssue(BaseModel):
    message: str
    row: Optional[Dict[str, Any]] = None


class SummaryEntry(BaseModel):
    """Base for rule-specific findings.

    `row_numbers` are 0-based positions of the backing rows in the rule's
    primary dataset, in the order they appear in `RuleResult.results`.
    """

    row_numbers: List[int] = Field(default_factory=list)


class RuleResult(BaseModel):
    rule_id: str
    results: List[Dict[str, Any]] = Field(default_factory=list)
    # Rule-specific SummaryEntry subclasses; typed as Any so dumps keep subclass fields.
    summary: List[Any] = Field(default_factory=list)
    errors: List[ValidationIssue] = Field(default_factory=list)
    # Set when the rule could not evaluate at all (bad shape, bad config, crash).
    failed: bool = False

    @classmethod
    def fatal(cls, rule_id: str, message: str, row: Any = None) -> "RuleResult":
        return cls(
            rule_id=rule_id,
            failed=True,
            errors=[ValidationIssue(message=message, row=row if isinstance(row, dict) else None)],
        )


class RuleOutcome(BaseModel):
    rule_id: str
    status: RunStatus
    config: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[RuleResult] = None
    reason: str = ""


class RunReport(BaseModel):
    run_id: str
    generated_at: datetime

    outcomes: List[RuleOutcome] = Field(default_factory=list)
    totals: Dict[RunStatus, int] = Field(default_factory=dict)

    def outcome(self, rule_id: str) -> Optional[RuleOutcome]:
        for item in self.outcomes:
            if item.rule_id == rule_id:
                return item
        return None
