"""
Explanation generator for cmdguard.

This module turns a parsed command into two plain-language strings: what the
command does, and a dry-run prediction of its concrete effect. Both are pure
template lookups keyed by tool.
"""

from typing import Callable, Dict, List, Sequence, Tuple

from cmdguard.executor.command_parser import unwrap_command

EMPTY_EXPLANATION = "Empty command."
EMPTY_DRY_RUN = "No operation would occur."


def _sentence(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _targets(args: Sequence[str]) -> List[str]:
    return [arg for arg in args if not arg.startswith("-")]


def _rm_mode(args: Sequence[str]) -> Tuple[bool, bool]:
    """Return (recursive, force) for rm arguments, short flags combined or not."""
    letters = set()
    for arg in args:
        if arg.startswith("-") and not arg.startswith("--"):
            letters.update(arg[1:])
    recursive = bool(letters & {"r", "R"}) or "--recursive" in args
    force = "f" in letters or "--force" in args
    return recursive, force


class ExplanationGenerator:
    """
    Template-based explanation and dry-run generator.

    Unknown tools fall back to a generic "Executes:" / "Would execute:" line.
    """

    def __init__(self) -> None:
        self._explainers: Dict[str, Callable[[List[str], str], str]] = {
            "rm": self._explain_rm,
            "mv": lambda args, arg_str: (
                "Moves/renames files. If target exists, it will be overwritten."
            ),
            "cp": self._explain_cp,
            "git": self._explain_git,
            "docker": self._explain_docker,
            "chmod": self._explain_chmod,
            "chown": self._explain_chown,
            "dd": lambda args, arg_str: (
                "Low-level disk copy utility. "
                "Extremely dangerous with wrong device parameters."
            ),
            "curl": self._explain_curl,
            "wget": self._explain_wget,
            "npm": self._explain_npm,
            "node": self._explain_node,
            "sudo": self._explain_sudo,
        }
        self._dry_runners: Dict[str, Callable[[List[str], str], str]] = {
            "rm": self._dry_run_rm,
            "git": self._dry_run_git,
            "docker": self._dry_run_docker,
            "chmod": self._dry_run_chmod,
            "chown": self._dry_run_chown,
            "dd": self._dry_run_dd,
            "sudo": self._dry_run_sudo,
        }

    def explain(self, tool: str, args: Sequence[str]) -> str:
        """
        Explain what a command does.

        Args:
            tool (str): The command tool.
            args (Sequence[str]): Argument tokens.

        Returns:
            str: A human-readable explanation.
        """
        if not tool:
            return EMPTY_EXPLANATION
        args = list(args)
        arg_str = " ".join(args)
        explainer = self._explainers.get(tool)
        if explainer is None:
            return f"Executes: {tool} {arg_str}".rstrip()
        return explainer(args, arg_str)

    def dry_run(self, tool: str, args: Sequence[str]) -> str:
        """
        Describe what would happen if the command were executed.

        Args:
            tool (str): The command tool.
            args (Sequence[str]): Argument tokens.

        Returns:
            str: A dry-run narrative.
        """
        if not tool:
            return EMPTY_DRY_RUN
        args = list(args)
        arg_str = " ".join(args)
        fallback = f"Would execute: {tool} {arg_str}".rstrip()
        runner = self._dry_runners.get(tool)
        if runner is None:
            return fallback
        return runner(args, arg_str) or fallback

    # Explanations

    def _explain_rm(self, args: List[str], arg_str: str) -> str:
        recursive, force = _rm_mode(args)
        if recursive and force:
            detail = (
                "Recursive mode (-rf) deletes everything in path WITHOUT confirmation."
            )
        elif recursive:
            detail = "Recursive mode (-r) deletes directories and contents."
        else:
            detail = "Deletes specified files."
        return _sentence("Deletes files/directories.", detail)

    def _explain_cp(self, args: List[str], arg_str: str) -> str:
        return _sentence(
            "Copies files.",
            "Recursive mode (-r) copies directories." if "-r" in arg_str else "",
        )

    def _explain_git(self, args: List[str], arg_str: str) -> str:
        subcommand = args[0] if args else "unknown"
        if arg_str.startswith("push"):
            detail = (
                "Force-push: overwrites remote history. Risky on shared repos."
                if "--force" in arg_str
                else "Uploads local commits to remote."
            )
        elif arg_str.startswith("reset"):
            detail = (
                "Hard reset: discards ALL uncommitted changes irreversibly."
                if "--hard" in arg_str
                else "Resets to specified commit (soft/mixed mode)."
            )
        elif arg_str.startswith("clean"):
            detail = (
                "Force-clean: deletes untracked files."
                if "-f" in arg_str
                else "Shows what would be deleted."
            )
        else:
            detail = "Git operation."
        return f"Git command: {subcommand}. {detail}"

    def _explain_docker(self, args: List[str], arg_str: str) -> str:
        subcommand = args[0] if args else "unknown"
        if arg_str.startswith("system prune"):
            detail = (
                "Removes all unused images (including tagged). High-impact."
                if "-a" in arg_str
                else "Removes only dangling resources."
            )
        elif arg_str.startswith("rmi"):
            detail = "Permanently deletes image. Dependent containers will break."
        elif arg_str.startswith("rm"):
            detail = "Deletes container(s). Data lost unless volume persists."
        else:
            detail = "Docker operation."
        return f"Docker command: {subcommand}. {detail}"

    def _explain_chmod(self, args: List[str], arg_str: str) -> str:
        mode = f"Setting to {args[0]}" if args else "Permission change"
        return f"Changes file permissions. {mode}."

    def _explain_chown(self, args: List[str], arg_str: str) -> str:
        return _sentence(
            "Changes file owner.",
            "Recursive (-R) applies to all subdirectories." if "-R" in args else "",
        )

    def _explain_curl(self, args: List[str], arg_str: str) -> str:
        return _sentence(
            "Fetches content from URL.",
            "Piping to shell (| sh/bash) executes downloaded content!"
            if "|" in arg_str
            else "Shows content or downloads file.",
        )

    def _explain_wget(self, args: List[str], arg_str: str) -> str:
        return _sentence(
            "Downloads files from URL.",
            "Piping to shell executes the downloaded file!"
            if "|" in arg_str
            else "Saves to disk.",
        )

    def _explain_npm(self, args: List[str], arg_str: str) -> str:
        # "uninstall" contains "install", so it is checked first
        if "uninstall" in arg_str:
            return "Removes npm packages from node_modules and package.json."
        if "install" in arg_str:
            return "Installs npm packages. Can modify package-lock.json and node_modules."
        if "publish" in arg_str:
            return (
                "Publishes package to npm registry. "
                "PERMANENT; cannot be undone easily."
            )
        return "npm package manager operation."

    def _explain_node(self, args: List[str], arg_str: str) -> str:
        return _sentence(
            "Executes JavaScript.",
            "Inline code execution with -e flag."
            if "-e" in arg_str
            else "Runs script file.",
        )

    def _explain_sudo(self, args: List[str], arg_str: str) -> str:
        wrapped = unwrap_command(args)
        if wrapped is None:
            return "Runs a shell with root privileges."
        inner_tool, inner_args = wrapped
        return _sentence(
            "Runs the following with root privileges:",
            self.explain(inner_tool, inner_args),
        )

    # Dry runs

    def _dry_run_rm(self, args: List[str], arg_str: str) -> str:
        targets = ", ".join(_targets(args)) or "[target path]"
        recursive = (
            " (recursively, with all contents)" if all(_rm_mode(args)) else ""
        )
        return f"Would delete: {targets}{recursive} WITHOUT recovery."

    def _dry_run_git(self, args: List[str], arg_str: str) -> str:
        if args and args[0] == "push" and "--force" in args:
            return (
                "Would overwrite remote history with local commits. Team members "
                "with old clones would need to force-pull."
            )
        if args and args[0] == "reset" and "--hard" in args:
            return (
                "Would discard all uncommitted changes. Files would revert to "
                "last commit state."
            )
        return ""

    def _dry_run_docker(self, args: List[str], arg_str: str) -> str:
        if args[:2] == ["system", "prune"]:
            removed = (
                "images (including used ones)" if "-a" in args else "unused resources"
            )
            return f"Would remove Docker {removed}. Freed space would be reclaimed."
        return ""

    def _dry_run_chmod(self, args: List[str], arg_str: str) -> str:
        perm = args[0] if args else "[mode]"
        targets = ", ".join(args[1:]) or "[target]"
        return f"Would set permissions to {perm} on {targets}."

    def _dry_run_chown(self, args: List[str], arg_str: str) -> str:
        if "-R" not in args:
            return ""
        operands = _targets(args)
        owner = operands[0] if operands else "[owner]"
        targets = ", ".join(operands[1:]) or "[target]"
        return (
            f"Would change the owner of {targets} and everything beneath it "
            f"to {owner}."
        )

    def _dry_run_dd(self, args: List[str], arg_str: str) -> str:
        operands = dict(arg.split("=", 1) for arg in args if "=" in arg)
        if "of" not in operands:
            return ""
        source = operands.get("if", "standard input")
        return (
            f"Would overwrite {operands['of']} with data from {source}. "
            "Existing contents would be lost."
        )

    def _dry_run_sudo(self, args: List[str], arg_str: str) -> str:
        wrapped = unwrap_command(args)
        if wrapped is None:
            return "Would open a shell with root privileges."
        inner_tool, inner_args = wrapped
        return f"With root privileges: {self.dry_run(inner_tool, inner_args)}"


# Global instance of the explanation generator
explanation_generator = ExplanationGenerator()
