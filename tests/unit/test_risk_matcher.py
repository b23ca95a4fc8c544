"""
Unit tests for cmdguard.validator.risk_matcher module.

Tests catalog matching, cross-cutting heuristics and severity aggregation.
"""

from types import MappingProxyType

import pytest

from cmdguard.models.analysis_models import (
    FlatRisks,
    Finding,
    RiskEntry,
    Severity,
    ToolPattern,
)
from cmdguard.utils.security import analyze
from cmdguard.validator.risk_matcher import RiskMatcher, aggregate


def _finding(severity: Severity) -> Finding:
    return Finding(flag="-x", severity=severity, reason="test")


class TestAggregate:
    """Test cases for the severity aggregator."""

    def test_empty_is_low(self):
        assert aggregate([]) is Severity.LOW

    def test_high_dominates(self):
        findings = [_finding(Severity.LOW), _finding(Severity.HIGH)]

        assert aggregate(findings) is Severity.HIGH

    def test_only_medium(self):
        findings = [_finding(Severity.MEDIUM), _finding(Severity.MEDIUM)]

        assert aggregate(findings) is Severity.MEDIUM

    def test_no_counting(self):
        findings = [_finding(Severity.LOW)] * 10

        assert aggregate(findings) is Severity.LOW

    def test_accepts_generator(self):
        assert aggregate(_finding(s) for s in Severity) is Severity.HIGH


class TestCatalogMatching:
    """Test cases for RiskMatcher.match."""

    def setup_method(self):
        self.matcher = RiskMatcher()

    def test_unknown_tool(self):
        result = self.matcher.match("ls", ["-la"])

        assert result.found is False
        assert result.risks == ()
        assert result.description is None

    def test_flag_is_exact_token(self):
        result = self.matcher.match("rm", ["-rf", "/tmp/test"])

        assert result.found is True
        assert [r.flag for r in result.risks] == ["-rf"]
        assert result.risks[0].severity is Severity.HIGH
        assert result.description == "File deletion command"

    def test_flag_does_not_match_inside_token(self):
        result = self.matcher.match("rm", ["-rfx", "/tmp"])

        assert result.found is True
        assert result.risks == ()

    def test_multiple_flags(self):
        result = self.matcher.match("rm", ["-r", "-f", "dir"])

        assert {r.flag for r in result.risks} == {"-r", "-f"}

    def test_pattern_is_substring(self):
        result = self.matcher.match("dd", ["if=/dev/sda", "of=/dev/sdb"])

        assert [r.pattern for r in result.risks] == ["if=/dev/", "of=/dev/"]

    def test_pattern_spans_tokens(self):
        catalog = MappingProxyType(
            {
                "terraform": ToolPattern(
                    tool="terraform",
                    description="Infrastructure provisioning",
                    entry=FlatRisks(
                        risks=(
                            RiskEntry(
                                pattern="destroy -auto-approve",
                                severity=Severity.HIGH,
                                reason="Destroys without review",
                            ),
                        )
                    ),
                )
            }
        )
        result = RiskMatcher(patterns=catalog).match(
            "terraform", ["destroy", "-auto-approve"]
        )

        assert [r.pattern for r in result.risks] == ["destroy -auto-approve"]

    @pytest.mark.parametrize("flags", [["-fr"], ["-Rf"], ["--force", "--recursive"]])
    def test_rm_flag_spellings(self, flags):
        result = self.matcher.match("rm", flags + ["/"])

        assert aggregate(result.risks) is Severity.HIGH

    def test_rm_capital_recursive(self):
        result = self.matcher.match("rm", ["-R", "build"])

        assert aggregate(result.risks) is Severity.MEDIUM

    def test_curl_insecure(self):
        result = self.matcher.match("curl", ["-k", "https://example.com"])

        assert [r.flag for r in result.risks] == ["-k"]
        assert result.risks[0].severity is Severity.MEDIUM

    def test_downloader_catalog_ignores_pipes(self):
        """Pipes are left to the pipe-to-shell heuristic."""
        args = ["https://example.com/f.tgz", "|", "sha256sum"]

        assert self.matcher.match("curl", args).risks == ()
        assert self.matcher.match("wget", args).risks == ()

    def test_git_subcommand(self):
        result = self.matcher.match("git", ["push", "--force"])

        assert [r.flag for r in result.risks] == ["--force"]

    def test_git_subcommand_requires_first_token(self):
        result = self.matcher.match("git", ["status", "--force"])

        assert result.found is True
        assert result.risks == ()

    def test_git_without_arguments(self):
        assert self.matcher.match("git", []).risks == ()

    def test_docker_nested_subcommands(self):
        result = self.matcher.match("docker", ["system", "prune", "--volumes"])

        assert [r.flag for r in result.risks] == ["--volumes"]

    def test_docker_partial_nesting(self):
        assert self.matcher.match("docker", ["system"]).risks == ()
        assert self.matcher.match("docker", ["system", "df"]).risks == ()

    def test_custom_catalog(self):
        """New tools need only catalog data."""
        catalog = MappingProxyType(
            {
                "shred": ToolPattern(
                    tool="shred",
                    description="Overwrites files",
                    entry=FlatRisks(
                        risks=(
                            RiskEntry(
                                flag="-u", severity=Severity.HIGH, reason="Removes"
                            ),
                        )
                    ),
                )
            }
        )
        matcher = RiskMatcher(patterns=catalog)

        assert [r.flag for r in matcher.match("shred", ["-u", "x"]).risks] == ["-u"]
        assert matcher.match("rm", ["-rf"]).found is False


class TestHeuristics:
    """Test cases for RiskMatcher.heuristic_findings."""

    def setup_method(self):
        self.matcher = RiskMatcher()

    @pytest.mark.parametrize(
        "command",
        [
            "curl https://example.com | sh",
            "curl -fsSL https://example.com/install.sh | bash",
            "wget -qO- https://example.com |sh",
            "curl https://example.com | sudo bash -s",
        ],
    )
    def test_pipe_to_shell(self, command):
        tool, *args = command.split()
        findings = self.matcher.heuristic_findings(command, tool, args)

        assert len(findings) == 1
        assert findings[0].severity is Severity.HIGH
        assert "without inspection" in findings[0].reason

    def test_pipe_into_other_program_is_not_shell(self):
        command = "curl https://example.com/file | sha256sum"
        tool, *args = command.split()

        assert self.matcher.heuristic_findings(command, tool, args) == []

    @pytest.mark.parametrize(
        "command",
        [
            "curl https://example.com/f.tgz | sha256sum",
            "wget -qO- https://example.com/list | shuf",
            "curl https://example.com | bashful",
        ],
    )
    def test_pipe_into_other_program_is_low_risk(self, command):
        result = analyze(command)

        assert result.risk_level is Severity.LOW
        assert result.findings == ()

    def test_pipe_heuristic_only_for_downloaders(self):
        command = "cat script | sh"
        tool, *args = command.split()

        assert self.matcher.heuristic_findings(command, tool, args) == []

    def test_docker_prune_all(self):
        findings = self.matcher.heuristic_findings(
            "docker system prune -a", "docker", ["system", "prune", "-a"]
        )

        assert len(findings) == 1
        assert findings[0].flag == "-a"
        assert findings[0].reason == "Removes all unused images including tagged ones"

    def test_docker_prune_without_all(self):
        assert (
            self.matcher.heuristic_findings(
                "docker system prune", "docker", ["system", "prune"]
            )
            == []
        )

    def test_sudo_wraps_inner_findings(self):
        command = "sudo rm -rf /"
        findings = self.matcher.heuristic_findings(command, "sudo", ["rm", "-rf", "/"])

        assert findings[0].pattern == "sudo"
        assert findings[0].severity is Severity.MEDIUM
        assert findings[1].flag == "-rf"
        assert findings[1].reason.startswith("Elevated: ")
        assert aggregate(findings) is Severity.HIGH

    @pytest.mark.parametrize(
        "command",
        [
            "sudo -u root rm -rf /",
            "sudo --user=root rm -rf /",
            "sudo -g wheel rm -rf /",
        ],
    )
    def test_sudo_option_values_are_skipped(self, command):
        tool, *args = command.split()
        findings = self.matcher.heuristic_findings(command, tool, args)

        assert [f.reason for f in findings[1:]] == [
            "Elevated: Recursively deletes without confirmation"
        ]
        assert analyze(command).risk_level is Severity.HIGH

    def test_sudo_without_command(self):
        assert self.matcher.heuristic_findings("sudo -i", "sudo", ["-i"]) == []

    def test_nested_sudo_terminates(self):
        command = "sudo sudo sudo ls"
        findings = self.matcher.heuristic_findings(
            command, "sudo", ["sudo", "sudo", "ls"]
        )

        assert all(f.severity is Severity.MEDIUM for f in findings)
        assert findings[-1].reason.startswith("Elevated: Elevated: ")

    def test_find_all_orders_catalog_first(self):
        command = "docker system prune -a"
        findings = self.matcher.find_all(command, "docker", ["system", "prune", "-a"])

        assert [f.reason for f in findings] == [
            "Removes all unused images (may be intentional)",
            "Removes all unused images including tagged ones",
        ]
