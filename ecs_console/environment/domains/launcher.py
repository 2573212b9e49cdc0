"""Launch a command with a resolved environment."""
import logging
import shlex
import subprocess
from typing import List

from .errors import Aborted, LaunchFailed
from .models import EnvironmentTable

logger = logging.getLogger(__name__)

# Characters that need a shell to interpret the command line
SHELL_METACHARACTERS = set("*?{}[]<>()~&|\\$;'`\"\n#=%")

SHELL = "/bin/sh"


def build_argv(command_line: str) -> List[str]:
    """
    Turn a command line into an argv.

    Simple command lines are split into words and executed directly; a line
    containing shell metacharacters is handed to /bin/sh -c.

    Raises:
        ValueError: If the command line is empty
    """
    if not command_line or not command_line.strip():
        raise ValueError("Command line is empty")
    if SHELL_METACHARACTERS.intersection(command_line):
        return [SHELL, "-c", command_line]
    return shlex.split(command_line)


def launch(table: EnvironmentTable, command_line: str) -> int:
    """
    Run a command with the table as its entire environment and wait for it.

    The child does not inherit this process's environment: it sees exactly
    the variables in `table`, with secret values unmasked. If PATH is not
    among them, executables are looked up on the OS default path.

    Args:
        table: Resolved environment
        command_line: Command to run, e.g. "rails console"

    Returns:
        The child's exit code (negative signal number if it was killed)

    Raises:
        LaunchFailed: If the command cannot be started
        Aborted: If interrupted while waiting; the child is left running
    """
    argv = build_argv(command_line)
    logger.info(f"Launching {argv[0]} with {len(table)} environment variables")

    try:
        process = subprocess.Popen(argv, env=table.as_environ())
    except OSError as e:
        raise LaunchFailed(f"Failed to start '{command_line}': {e}") from e

    try:
        returncode = process.wait()
    except KeyboardInterrupt:
        logger.debug(f"Interrupted while waiting for pid {process.pid}, not terminating it")
        raise Aborted()

    logger.info(f"Command exited with status {returncode}")
    return returncode
