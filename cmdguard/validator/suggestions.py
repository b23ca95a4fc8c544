"""
Safer-alternative suggestions for cmdguard.

Directed suggestions are curated rewrites looked up by literal substring of
the whole command, first match in declaration order. A trigger must end at a
token boundary, and rules scoped to tools only apply to those tools.
Contextual suggestions are hand-written advice conditioned on tool and
argument combinations.
"""

from typing import Optional, Sequence, Tuple

from cmdguard.models.analysis_models import SuggestionResolution, SuggestionRule

SUGGESTIONS: Tuple[SuggestionRule, ...] = (
    SuggestionRule(
        trigger="rm -rf",
        dangerous="rm -rf <path>",
        safer="rm -ri <path>",
        explanation="Interactive mode prompts before each deletion",
    ),
    SuggestionRule(
        trigger="rm -fr",
        dangerous="rm -fr <path>",
        safer="rm -ri <path>",
        explanation="Interactive mode prompts before each deletion",
    ),
    SuggestionRule(
        trigger="rm -Rf",
        dangerous="rm -Rf <path>",
        safer="rm -ri <path>",
        explanation="Interactive mode prompts before each deletion",
    ),
    SuggestionRule(
        trigger="rm --force --recursive",
        dangerous="rm --force --recursive <path>",
        safer="rm -ri <path>",
        explanation="Interactive mode prompts before each deletion",
    ),
    SuggestionRule(
        trigger="git push --force",
        dangerous="git push --force",
        safer="git push --force-with-lease",
        explanation=(
            "Only force-push if remote hasn't changed; safer for shared repos"
        ),
    ),
    SuggestionRule(
        trigger="git reset --hard",
        dangerous="git reset --hard",
        safer="Create backup branch first: git branch backup && git reset --hard",
        explanation="Preserves commit history in case you need to recover",
    ),
    SuggestionRule(
        trigger="docker system prune -a",
        dangerous="docker system prune -a",
        safer="docker system prune (without -a) or docker image prune",
        explanation=(
            "Without -a, only removes dangling images. Safer for production"
        ),
    ),
    SuggestionRule(
        trigger="chmod 777",
        dangerous="chmod 777 <path>",
        safer="chmod 755 <path> (executables) or chmod 644 <path> (files)",
        explanation="Restricts access to owner+group, not world-readable",
    ),
    SuggestionRule(
        trigger="| sh",
        tools=("curl", "wget"),
        dangerous="curl <url> | sh",
        safer="curl <url> -o script.sh && cat script.sh && sh script.sh",
        explanation="Inspect the script before executing it",
    ),
    SuggestionRule(
        trigger="| bash",
        tools=("curl", "wget"),
        dangerous="curl <url> | bash",
        safer="curl <url> -o script.sh && cat script.sh && bash script.sh",
        explanation="Inspect the script before executing it",
    ),
)


def _trigger_matches(trigger: str, command: str) -> bool:
    start = command.find(trigger)
    while start != -1:
        end = start + len(trigger)
        if end == len(command) or command[end].isspace():
            return True
        start = command.find(trigger, start + 1)
    return False


def get_suggestion(
    command: str, tool: Optional[str] = None
) -> Optional[SuggestionRule]:
    """
    Get the curated safer alternative for a command.

    Args:
        command (str): The full raw command string.
        tool (Optional[str]): The command tool; taken from the first token
            of the command when omitted.

    Returns:
        Optional[SuggestionRule]: The first applicable rule whose trigger
        occurs in the command, or None.
    """
    if tool is None:
        parts = command.split()
        tool = parts[0] if parts else ""
    for rule in SUGGESTIONS:
        if rule.tools and tool not in rule.tools:
            continue
        if _trigger_matches(rule.trigger, command):
            return rule
    return None


def get_contextual_suggestion(tool: str, args: Sequence[str]) -> Optional[str]:
    """
    Get hand-written advice for a tool and argument combination.

    Args:
        tool (str): The command tool.
        args (Sequence[str]): Argument tokens.

    Returns:
        Optional[str]: The advice, or None when nothing applies.
    """
    if tool == "npm" and "install" in args:
        return (
            "Consider using npm ci for CI/CD "
            "(installs exact versions from package-lock.json)"
        )
    if tool == "npm" and "uninstall" in args:
        return (
            "Backup your node_modules or use npm ci to restore "
            "from package-lock.json if needed"
        )
    if tool == "docker" and args and args[0] == "build" and "--no-cache" in args:
        return (
            "Building without cache; this will take longer. "
            "Only use if you need fresh layers"
        )
    if tool == "git" and "--amend" in args:
        return "Amending commits rewrites history. Only do this before pushing"
    return None


def resolve(command: str, tool: str, args: Sequence[str]) -> SuggestionResolution:
    """Resolve both the directed and the contextual suggestion for a command."""
    return SuggestionResolution(
        directed=get_suggestion(command, tool),
        contextual=get_contextual_suggestion(tool, args),
    )


def format_directed(rule: SuggestionRule) -> str:
    return f"Safer alternative: {rule.safer} ({rule.explanation})"
