"""
Risk matcher for cmdguard.

This module evaluates a parsed command against the risk pattern catalog and
a small set of cross-cutting heuristics, and reduces the resulting findings
to a single overall severity.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from cmdguard.executor.command_parser import unwrap_command
from cmdguard.models.analysis_models import (
    FlatRisks,
    Finding,
    MatchResult,
    RiskEntry,
    Severity,
    Subcommands,
)
from cmdguard.utils.logging import get_logger
from cmdguard.validator.risk_patterns import RISK_PATTERNS

logger = get_logger("validator.risk_matcher")


def aggregate(findings: Iterable[Finding]) -> Severity:
    """
    Reduce findings to one overall severity.

    Args:
        findings (Iterable[Finding]): Matched findings.

    Returns:
        Severity: The highest severity present, or LOW when there are none.
    """
    return max(
        (finding.severity for finding in findings),
        key=lambda severity: severity.rank,
        default=Severity.LOW,
    )


class RiskMatcher:
    """
    Matcher for command risks.

    Declarative per-tool patterns come from the catalog. Compound conditions
    that need more than one token (pipes, multi-word subcommands, wrapped
    commands) live here as explicit heuristics.
    """

    # Pipe into a shell interpreter, optionally through sudo
    PIPE_TO_SHELL = re.compile(r"\|\s*(?:sudo\s+)?(sh|bash)(?=\s|$)")

    DOWNLOADERS = ("curl", "wget")

    def __init__(self, patterns=None):
        """Initialize the matcher with a catalog (defaults to the built-in one)."""
        self.patterns = RISK_PATTERNS if patterns is None else patterns

    def match(self, tool: str, args: Sequence[str]) -> MatchResult:
        """
        Match a tool and its arguments against the catalog.

        Args:
            tool (str): The command tool (e.g., 'rm', 'git').
            args (Sequence[str]): Argument tokens.

        Returns:
            MatchResult: Catalog findings and the tool description.
        """
        pattern = self.patterns.get(tool)
        if pattern is None:
            return MatchResult(found=False, tool=tool)

        findings: List[Finding] = []
        self._match_entry(pattern.entry, list(args), 0, findings)
        return MatchResult(
            found=True,
            tool=tool,
            risks=tuple(findings),
            description=pattern.description,
        )

    def _match_entry(
        self, entry, args: List[str], depth: int, findings: List[Finding]
    ) -> None:
        if isinstance(entry, FlatRisks):
            findings.extend(self._match_risks(entry.risks, args))
        elif isinstance(entry, Subcommands):
            # Each level consumes one token, so depth never exceeds len(args)
            if depth < len(args):
                child = entry.entries.get(args[depth])
                if child is not None:
                    self._match_entry(child, args, depth + 1, findings)

    def _match_risks(
        self, risks: Sequence[RiskEntry], args: List[str]
    ) -> List[Finding]:
        arg_str = " ".join(args)
        matched = []
        for risk in risks:
            if risk.flag is not None and risk.flag in args:
                matched.append(Finding.from_entry(risk))
            elif risk.pattern is not None and risk.pattern in arg_str:
                matched.append(Finding.from_entry(risk))
        return matched

    def heuristic_findings(
        self, command: str, tool: str, args: Sequence[str]
    ) -> List[Finding]:
        """
        Evaluate the cross-cutting heuristics.

        Args:
            command (str): The full raw command string.
            tool (str): The command tool.
            args (Sequence[str]): Argument tokens.

        Returns:
            List[Finding]: Heuristic findings, independent of the catalog.
        """
        findings: List[Finding] = []

        if tool in self.DOWNLOADERS:
            pipe = self.PIPE_TO_SHELL.search(command)
            if pipe:
                findings.append(
                    Finding(
                        pattern=f"| {pipe.group(1)}",
                        severity=Severity.HIGH,
                        reason=(
                            "Piping to shell executes downloaded content "
                            "without inspection"
                        ),
                    )
                )

        if (
            tool == "docker"
            and len(args) >= 2
            and args[0] == "system"
            and args[1] == "prune"
            and "-a" in args
        ):
            findings.append(
                Finding(
                    flag="-a",
                    severity=Severity.HIGH,
                    reason="Removes all unused images including tagged ones",
                )
            )

        if tool == "sudo":
            findings.extend(self._elevated_findings(command, args))

        return findings

    def _elevated_findings(self, command: str, args: Sequence[str]) -> List[Finding]:
        wrapped = unwrap_command(args)
        if wrapped is None:
            return []

        inner_tool, inner_args = wrapped
        findings = [
            Finding(
                pattern="sudo",
                severity=Severity.MEDIUM,
                reason="Executes with root privileges; verify the command is safe",
            )
        ]
        for finding in self.find_all(command, inner_tool, inner_args):
            findings.append(
                finding.model_copy(update={"reason": f"Elevated: {finding.reason}"})
            )
        return findings

    def find_all(self, command: str, tool: str, args: Sequence[str]) -> List[Finding]:
        """
        Collect catalog findings followed by heuristic findings.

        Args:
            command (str): The full raw command string.
            tool (str): The command tool.
            args (Sequence[str]): Argument tokens.

        Returns:
            List[Finding]: All findings, catalog first.
        """
        findings = list(self.match(tool, args).risks)
        findings.extend(self.heuristic_findings(command, tool, args))
        logger.debug(f"Matched {len(findings)} finding(s) for tool '{tool}'")
        return findings
