"""
Risk pattern catalog for cmdguard.

This module holds the static registry of known-dangerous flags, substrings
and subcommands per tool. Adding a tool only means adding an entry here;
the matcher walks the catalog generically.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from cmdguard.models.analysis_models import (
    FlatRisks,
    RiskEntry,
    Severity,
    Subcommands,
    ToolPattern,
)

HIGH = Severity.HIGH
MEDIUM = Severity.MEDIUM
LOW = Severity.LOW


def _flag(flag: str, severity: Severity, reason: str) -> RiskEntry:
    return RiskEntry(flag=flag, severity=severity, reason=reason)


def _pattern(pattern: str, severity: Severity, reason: str) -> RiskEntry:
    return RiskEntry(pattern=pattern, severity=severity, reason=reason)


def _flat(*risks: RiskEntry) -> FlatRisks:
    return FlatRisks(risks=risks)


_PATTERNS = [
    ToolPattern(
        tool="rm",
        description="File deletion command",
        entry=_flat(
            _flag("-rf", HIGH, "Recursively deletes without confirmation"),
            _flag("-fr", HIGH, "Recursively deletes without confirmation"),
            _flag("-Rf", HIGH, "Recursively deletes without confirmation"),
            _flag("-f", HIGH, "Forces deletion, ignores permissions"),
            _flag("--force", HIGH, "Forces deletion, ignores permissions"),
            _flag("-r", MEDIUM, "Recursive deletion; combine with -f for high risk"),
            _flag("-R", MEDIUM, "Recursive deletion; combine with -f for high risk"),
            _flag(
                "--recursive",
                MEDIUM,
                "Recursive deletion; combine with -f for high risk",
            ),
        ),
    ),
    ToolPattern(
        tool="git",
        description="Git version control",
        entry=Subcommands(
            entries={
                "push": _flat(
                    _flag(
                        "--force", HIGH, "Overwrites remote history; may affect team"
                    ),
                    _flag("-f", HIGH, "Same as --force; destructive to shared repo"),
                ),
                "reset": _flat(
                    _flag(
                        "--hard",
                        HIGH,
                        "Discards all uncommitted changes irreversibly",
                    ),
                ),
                "clean": _flat(
                    _flag("-f", HIGH, "Forces deletion of untracked files"),
                    _flag("-fd", HIGH, "Deletes untracked files AND directories"),
                ),
            }
        ),
    ),
    ToolPattern(
        tool="docker",
        description="Docker container/image operations",
        entry=Subcommands(
            entries={
                "system": Subcommands(
                    entries={
                        "prune": _flat(
                            _flag(
                                "-a",
                                HIGH,
                                "Removes all unused images (may be intentional)",
                            ),
                            _flag(
                                "--volumes",
                                HIGH,
                                "Deletes unused volumes with potential data",
                            ),
                        ),
                    }
                ),
                "rmi": _flat(
                    _flag(
                        "-f",
                        HIGH,
                        "Force removes image, breaks dependent containers",
                    ),
                ),
                "rm": _flat(
                    _flag(
                        "-f", MEDIUM, "Force removes container; data loss possible"
                    ),
                ),
            }
        ),
    ),
    ToolPattern(
        tool="dd",
        description="Disk/device data copy; extreme risk with wrong arguments",
        entry=_flat(
            _pattern("if=/dev/", HIGH, "Reading from raw disk device"),
            _pattern(
                "of=/dev/",
                HIGH,
                "Writing to raw disk device; IRREVERSIBLE data corruption",
            ),
        ),
    ),
    ToolPattern(
        tool="chmod",
        description="File permission change",
        entry=_flat(
            _flag(
                "777", HIGH, "World-readable/writable; major security vulnerability"
            ),
            _flag("755", LOW, "Standard; acceptable for most executables"),
        ),
    ),
    ToolPattern(
        tool="chown",
        description="Change file owner",
        entry=_flat(
            _flag(
                "-R", HIGH, "Recursively changes ownership; can break system access"
            ),
        ),
    ),
    ToolPattern(
        tool="sudo",
        description="Elevated privilege execution",
        entry=_flat(
            _flag("-i", MEDIUM, "Starts an interactive root login shell"),
            _flag("-s", MEDIUM, "Starts a shell with root privileges"),
            _flag("-E", LOW, "Preserves the caller's environment under root"),
        ),
    ),
    ToolPattern(
        tool="curl",
        description="HTTP client; can execute remote code if piped",
        # Pipes into a shell are matched by RiskMatcher.PIPE_TO_SHELL
        entry=_flat(
            _flag("-k", MEDIUM, "Skips TLS certificate verification"),
            _flag("--insecure", MEDIUM, "Skips TLS certificate verification"),
        ),
    ),
    ToolPattern(
        tool="wget",
        description="File downloader; dangerous if output is executed",
        entry=_flat(
            _flag(
                "--no-check-certificate",
                MEDIUM,
                "Skips TLS certificate verification",
            ),
        ),
    ),
]

RISK_PATTERNS: Mapping[str, ToolPattern] = MappingProxyType(
    {pattern.tool: pattern for pattern in _PATTERNS}
)


def get_tool_pattern(tool: str) -> Optional[ToolPattern]:
    """
    Look up the catalog entry for a tool.

    Args:
        tool (str): Exact, case-sensitive tool name.

    Returns:
        Optional[ToolPattern]: The entry, or None for tools the catalog
        does not know.
    """
    return RISK_PATTERNS.get(tool)
