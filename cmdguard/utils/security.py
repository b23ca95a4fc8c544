"""
Security utilities for cmdguard.

This module provides the command safety analyzer: it splits a raw command,
matches it against the risk catalog and heuristics, aggregates the overall
risk level, and attaches suggestions and explanations.
"""

from typing import List

from cmdguard.executor.command_parser import split_command
from cmdguard.explainer.explanations import (
    EMPTY_DRY_RUN,
    EMPTY_EXPLANATION,
    ExplanationGenerator,
    explanation_generator,
)
from cmdguard.models.analysis_models import AnalysisResult, Severity
from cmdguard.utils.logging import get_logger
from cmdguard.validator import suggestions
from cmdguard.validator.risk_matcher import RiskMatcher, aggregate

logger = get_logger("utils.security")


class CommandSafetyAnalyzer:
    """
    Analyzer for command safety.

    Each call is independent: the analyzer holds only read-only catalog
    references, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        matcher: RiskMatcher = None,
        explainer: ExplanationGenerator = None,
    ):
        """Initialize the command safety analyzer."""
        self.matcher = matcher or RiskMatcher()
        self.explainer = explainer or explanation_generator

    def analyze_command(self, command: str) -> AnalysisResult:
        """
        Analyze a command for safety concerns.

        Args:
            command (str): The raw command string.

        Returns:
            AnalysisResult: Analysis results. Never raises for string input.
        """
        parsed = split_command(command)
        tool, args = parsed.tool, list(parsed.args)

        if not tool:
            return AnalysisResult(
                tool="",
                command=command,
                risk_level=Severity.LOW,
                explanation=EMPTY_EXPLANATION,
                dry_run=EMPTY_DRY_RUN,
            )

        match = self.matcher.match(tool, args)
        findings = list(match.risks)
        findings.extend(self.matcher.heuristic_findings(command, tool, args))
        risk_level = aggregate(findings)

        resolution = suggestions.resolve(command, tool, args)
        display: List[str] = []
        if resolution.directed is not None:
            display.append(suggestions.format_directed(resolution.directed))
        if resolution.contextual is not None:
            display.append(resolution.contextual)

        logger.debug(
            f"Analyzed '{tool}': {len(findings)} finding(s), "
            f"risk level {risk_level.value}"
        )

        return AnalysisResult(
            tool=tool,
            command=command,
            risk_level=risk_level,
            findings=tuple(findings),
            suggestions=tuple(display),
            explanation=self.explainer.explain(tool, args),
            dry_run=self.explainer.dry_run(tool, args),
            directed_suggestion=resolution.directed,
            contextual_suggestion=resolution.contextual,
            description=match.description,
        )


# Global instance of the command safety analyzer
safety_analyzer = CommandSafetyAnalyzer()


def analyze(command: str) -> AnalysisResult:
    """Analyze a raw command string with the shared analyzer."""
    return safety_analyzer.analyze_command(command)
