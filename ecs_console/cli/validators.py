"""Input validation for CLI arguments."""
import sys
from typing import List


def validate_cluster_name(name: str, clusters: List[str]) -> None:
    """
    Validate the cluster is one of the configured clusters.

    Args:
        name: Cluster name to validate
        clusters: Allowed cluster names from config

    Raises:
        SystemExit with code 2 if validation fails
    """
    if name not in clusters:
        print(f"Error: Invalid cluster '{name}'", file=sys.stderr)
        print(f"\nAllowed clusters: {', '.join(clusters)}", file=sys.stderr)
        print("Add clusters to the 'clusters' list of your config file to use them.", file=sys.stderr)
        sys.exit(2)


def validate_command(command: str) -> None:
    """
    Validate the command to run is not empty.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not command or command.strip() == "":
        print("Error: Command cannot be empty", file=sys.stderr)
        print("\nExample: --command \"rails console\"", file=sys.stderr)
        sys.exit(2)
