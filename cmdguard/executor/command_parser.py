"""
Command parser for cmdguard.

This module splits raw command strings into a tool and argument tokens, and
breaks commands down into described components for detailed explanations.
"""

from typing import AbstractSet, List, Optional, Sequence, Tuple

from cmdguard.models.analysis_models import Command, Finding
from cmdguard.models.command_models import CommandComponent, ComponentType


def split_command(command: str) -> Command:
    """
    Split a command string into tool and arguments.

    Runs of whitespace separate tokens. Quoting is not interpreted, so a
    quoted argument containing spaces becomes several tokens.

    Args:
        command (str): The raw command string.

    Returns:
        Command: The tool (empty for blank input) and its argument tokens.
    """
    parts = command.split()
    if not parts:
        return Command()
    return Command(tool=parts[0], args=tuple(parts[1:]))


# sudo options whose value is the following token
SUDO_VALUE_OPTIONS = frozenset(
    {
        "-u", "-g", "-C", "-D", "-h", "-p", "-r", "-t", "-U", "-T",
        "--user", "--group", "--close-from", "--chdir", "--host",
        "--prompt", "--role", "--type", "--other-user", "--command-timeout",
    }
)


def unwrap_command(
    args: Sequence[str], value_options: AbstractSet[str] = SUDO_VALUE_OPTIONS
) -> Optional[Tuple[str, List[str]]]:
    """
    Find the command wrapped by a prefix tool such as sudo.

    Options listed in ``value_options`` consume the next token as their
    value; ``--user=root`` style options are a single token. ``--`` ends
    the options.

    Args:
        args (Sequence[str]): Arguments of the wrapping tool.
        value_options (AbstractSet[str]): Options that take a separate value.

    Returns:
        Optional[Tuple[str, List[str]]]: The wrapped tool and its arguments,
        or None when no command follows the options.
    """
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            index += 1
            break
        if not arg.startswith("-"):
            break
        index += 2 if arg in value_options else 1

    if index >= len(args):
        return None
    return args[index], list(args[index + 1 :])


class CommandParser:
    """
    Parser for shell commands.

    This class handles splitting commands and describing their components.
    """

    FLAG_DESCRIPTIONS = {
        "-r": "Recursive operation flag",
        "-R": "Recursive operation flag",
        "--recursive": "Recursive operation flag",
        "-f": "Force operation without confirmation",
        "--force": "Force operation without confirmation",
        "-i": "Interactive mode, prompts before acting",
        "-v": "Verbose output flag",
        "--verbose": "Verbose output flag",
        "-h": "Help flag to display usage information",
        "--help": "Help flag to display usage information",
    }

    OPERATOR_DESCRIPTIONS = {
        ">": "Output redirection (overwrites file)",
        ">>": "Output redirection (appends to file)",
        "<": "Input redirection (reads from file)",
        "|": "Pipe output to another command",
    }

    def parse_command(self, command: str) -> Command:
        """
        Parse a command string into command and arguments.

        Args:
            command (str): The command string to parse.

        Returns:
            Command: The parsed command.
        """
        return split_command(command)

    def extract_command_components(
        self, command: str, findings: Sequence[Finding] = ()
    ) -> List[CommandComponent]:
        """
        Extract and describe components of a command.

        Args:
            command (str): The command to analyze.
            findings (Sequence[Finding]): Findings for the command; a flag that
                matched one is described by its reason.

        Returns:
            List[CommandComponent]: One component per token.
        """
        parsed = self.parse_command(command)
        if not parsed.tool:
            return []

        reasons = {}
        for finding in findings:
            if finding.flag is not None:
                reasons.setdefault(finding.flag, finding.reason)

        components = [
            CommandComponent(
                part=parsed.tool,
                description="The main command to execute",
                type=ComponentType.COMMAND,
            )
        ]

        args = parsed.args
        i = 0
        while i < len(args):
            arg = args[i]

            if arg in self.OPERATOR_DESCRIPTIONS:
                is_pipe = arg == "|"
                components.append(
                    CommandComponent(
                        part=arg,
                        description=self.OPERATOR_DESCRIPTIONS[arg],
                        type=ComponentType.PIPE if is_pipe else ComponentType.REDIRECTION,
                    )
                )
                # The next token is the redirection target or piped command
                if i + 1 < len(args):
                    target_type = "command" if is_pipe else "file"
                    components.append(
                        CommandComponent(
                            part=args[i + 1],
                            description=f"Target {target_type} for {arg} operation",
                            type=ComponentType.COMMAND if is_pipe else ComponentType.PATH,
                        )
                    )
                    i += 1

            elif arg in reasons:
                components.append(
                    CommandComponent(
                        part=arg, description=reasons[arg], type=ComponentType.FLAG
                    )
                )

            elif arg.startswith("-"):
                components.append(
                    CommandComponent(
                        part=arg,
                        description=self.FLAG_DESCRIPTIONS.get(arg, "Command flag"),
                        type=ComponentType.FLAG,
                    )
                )

            elif i == 0 and parsed.tool in ("git", "docker", "npm"):
                components.append(
                    CommandComponent(
                        part=arg,
                        description=f"{parsed.tool} subcommand",
                        type=ComponentType.SUBCOMMAND,
                    )
                )

            elif "/" in arg or "\\" in arg or "." in arg:
                components.append(
                    CommandComponent(
                        part=arg,
                        description="File or directory path",
                        type=ComponentType.PATH,
                    )
                )

            else:
                components.append(
                    CommandComponent(
                        part=arg,
                        description="Command argument",
                        type=ComponentType.ARGUMENT,
                    )
                )

            i += 1

        return components
