from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

Severity = Literal["FAIL", "WARN", "INFO"]


class Finding(BaseModel):
    """A single validation finding with severity, code, message, and context."""

    model_config = ConfigDict(extra="ignore")
    severity: Severity
    code: str
    message: str
    context: dict = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """Findings from one validation call.

    FAIL findings block the change, WARN findings are advisory and INFO
    findings are notes; only FAIL affects `is_valid`.
    """

    model_config = ConfigDict(extra="ignore")
    findings: list[Finding] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not any(f.severity == "FAIL" for f in self.findings)

    @computed_field
    @property
    def errors(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == "FAIL"]

    @computed_field
    @property
    def warnings(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == "WARN"]

    @property
    def summary(self) -> dict:
        return {
            "fail": len([f for f in self.findings if f.severity == "FAIL"]),
            "warn": len([f for f in self.findings if f.severity == "WARN"]),
            "info": len([f for f in self.findings if f.severity == "INFO"]),
        }

    def merged(self, *others: "ValidationResult") -> "ValidationResult":
        findings = list(self.findings)
        for other in others:
            findings.extend(other.findings)
        return ValidationResult(findings=findings)
