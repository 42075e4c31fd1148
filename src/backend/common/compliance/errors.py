from __future__ import annotations


class ComplianceError(Exception):
    pass


class UnknownRuleError(ComplianceError, KeyError):
    def __init__(self, rule_id: str):
        super().__init__(rule_id)
        self.rule_id = rule_id

    def __str__(self) -> str:
        return f"Unknown compliance test: {self.rule_id}"


class RuleExecutionError(ComplianceError):
    def __init__(self, rule_id: str, messages: list[str]):
        self.rule_id = rule_id
        self.messages = messages
        super().__init__(f"{rule_id} failed: {'; '.join(messages)}")
