"""
Outcome classification for failed commands.

Maps an exit status and stderr text to an ErrorKind plus a message and,
for a few kinds, a remediation hint. Exit-code signatures are checked
before the stderr heuristics.
"""

from __future__ import annotations

from termexec._types import Classification, ErrorKind

# Exit statuses reported by POSIX shells
EXIT_CODE_KINDS: dict[int, ErrorKind] = {
    127: ErrorKind.COMMAND_NOT_FOUND,
    126: ErrorKind.PERMISSION_DENIED,
    130: ErrorKind.INTERRUPTED,
    137: ErrorKind.KILLED,
    124: ErrorKind.TIMEOUT,
}

# Checked in order, first substring hit wins
STDERR_MARKERS: list[tuple[tuple[str, ...], ErrorKind]] = [
    (("permission denied",), ErrorKind.PERMISSION_DENIED),
    (("command not found", "not found"), ErrorKind.COMMAND_NOT_FOUND),
    (("No such file or directory",), ErrorKind.FILE_NOT_FOUND),
]

HINTS: dict[ErrorKind, str] = {
    ErrorKind.COMMAND_NOT_FOUND: (
        "Check the spelling of the command, or install it and make sure it is on PATH."
    ),
    ErrorKind.PERMISSION_DENIED: (
        "Check file permissions (ls -l) or make the file executable with chmod +x."
    ),
    ErrorKind.FILE_NOT_FOUND: (
        "Verify the path with ls, and check whether it is relative to the working directory."
    ),
}


def classify_kind(exit_code: int, stderr: str) -> ErrorKind:
    """Return the ErrorKind for a failed command. Never raises."""
    kind = EXIT_CODE_KINDS.get(exit_code)
    if kind is not None:
        return kind

    for markers, marker_kind in STDERR_MARKERS:
        if any(marker in stderr for marker in markers):
            return marker_kind

    if exit_code > 0:
        return ErrorKind.COMMAND_FAILED
    return ErrorKind.UNKNOWN_ERROR


def error_message(kind: ErrorKind, exit_code: int, command: str = "") -> str:
    """Human-readable message template for an ErrorKind."""
    if kind is ErrorKind.COMMAND_NOT_FOUND:
        parts = command.split()
        name = parts[0] if parts else command
        return f"Command not found. The command '{name}' does not exist or is not in PATH."
    if kind is ErrorKind.PERMISSION_DENIED:
        return (
            "Permission denied. You don't have permission to execute this command "
            "or access the resource."
        )
    if kind is ErrorKind.FILE_NOT_FOUND:
        return "File or directory not found. Check that the path exists and is spelled correctly."
    if kind is ErrorKind.INTERRUPTED:
        return "Command was interrupted (SIGINT/Ctrl+C)."
    if kind is ErrorKind.KILLED:
        return "Command was killed (SIGKILL). Possibly out of memory or exceeded resource limits."
    if kind is ErrorKind.TIMEOUT:
        return "Command exceeded time limit."
    if kind is ErrorKind.COMMAND_FAILED:
        return f"Command exited with non-zero status code {exit_code}."
    return f"Command failed with exit code {exit_code}."


def classify(exit_code: int, stderr: str, command: str = "") -> Classification:
    """
    Classify a failed command.

    Args:
        exit_code: The process exit status.
        stderr: Captured standard error text.
        command: The command line, used to name the missing command.

    Returns:
        Classification with kind, message and an optional hint.
    """
    kind = classify_kind(exit_code, stderr)
    return Classification(
        kind=kind,
        message=error_message(kind, exit_code, command),
        hint=HINTS.get(kind),
    )
