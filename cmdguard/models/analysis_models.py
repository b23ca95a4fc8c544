"""
Data models for cmdguard command analysis.

Catalog data (risk entries, suggestion rules) and per-call results are frozen
Pydantic models so nothing can mutate them after construction.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class Command(BaseModel):
    """A raw command split into its tool and argument tokens."""

    model_config = ConfigDict(frozen=True)

    tool: str = ""
    args: Tuple[str, ...] = ()

    @property
    def arg_string(self) -> str:
        return " ".join(self.args)


class RiskEntry(BaseModel):
    """
    One known risk indicator for a tool.

    Flag-keyed entries match an exact argument token; pattern-keyed entries
    match a substring of the space-joined arguments.
    """

    model_config = ConfigDict(frozen=True)

    flag: Optional[str] = None
    pattern: Optional[str] = None
    severity: Severity
    reason: str

    @model_validator(mode="after")
    def _check_key(self) -> "RiskEntry":
        if (self.flag is None) == (self.pattern is None):
            raise ValueError("RiskEntry needs exactly one of 'flag' or 'pattern'")
        return self


class FlatRisks(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["flat"] = "flat"
    risks: Tuple[RiskEntry, ...] = ()


class Subcommands(BaseModel):
    """Risk lists keyed by the next argument token; entries may nest."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["subcommands"] = "subcommands"
    entries: Dict[str, "CatalogEntry"] = Field(default_factory=dict)


CatalogEntry = Annotated[Union[FlatRisks, Subcommands], Field(discriminator="kind")]

Subcommands.model_rebuild()


class ToolPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    tool: str
    description: str
    entry: CatalogEntry


class Finding(BaseModel):
    """A risk indicator that matched a specific command."""

    model_config = ConfigDict(frozen=True)

    flag: Optional[str] = None
    pattern: Optional[str] = None
    severity: Severity
    reason: str

    @property
    def indicator(self) -> str:
        return self.flag if self.flag is not None else (self.pattern or "")

    @classmethod
    def from_entry(cls, entry: RiskEntry) -> "Finding":
        return cls(
            flag=entry.flag,
            pattern=entry.pattern,
            severity=entry.severity,
            reason=entry.reason,
        )


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    found: bool
    tool: str
    risks: Tuple[Finding, ...] = ()
    description: Optional[str] = None


class SuggestionRule(BaseModel):
    """
    A curated safer rewrite triggered by a literal substring of the command.

    An empty ``tools`` tuple applies the rule to every tool.
    """

    model_config = ConfigDict(frozen=True)

    trigger: str
    dangerous: str
    safer: str
    explanation: str
    tools: Tuple[str, ...] = ()


class SuggestionResolution(BaseModel):
    model_config = ConfigDict(frozen=True)

    directed: Optional[SuggestionRule] = None
    contextual: Optional[str] = None


class AnalysisResult(BaseModel):
    """Everything the presentation layer needs to know about one command."""

    model_config = ConfigDict(frozen=True)

    tool: str
    command: str
    risk_level: Severity = Severity.LOW
    findings: Tuple[Finding, ...] = ()
    suggestions: Tuple[str, ...] = ()
    explanation: str
    dry_run: str
    directed_suggestion: Optional[SuggestionRule] = None
    contextual_suggestion: Optional[str] = None
    description: Optional[str] = None
