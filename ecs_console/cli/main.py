"""CLI entrypoint for ecs-console."""
import sys
import argparse
import logging
from typing import Any, Dict, List, Optional

from ecs_console import VERSION
from ecs_console.environment.domains.config_loader import ConfigError, build_session, load_config
from ecs_console.environment.domains.ecs_client import EcsServiceDirectory
from ecs_console.environment.domains.errors import Aborted, EcsConsoleError, EmptyDirectory
from ecs_console.environment.domains.launcher import launch
from ecs_console.environment.domains.presenter import render
from ecs_console.environment.domains.ssm_client import SsmSecretResolver
from ecs_console.environment.workflows.resolve_environment import resolve_environment

from .prompt import select_service
from .validators import validate_cluster_name, validate_command

# Exit code for operator interrupts (128 + SIGINT)
EXIT_ABORTED = 130

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def exit_status(returncode: int) -> int:
    """Shell-style exit status for a child return code."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _set_verbosity(verbose: int) -> None:
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)
    # botocore is chatty at DEBUG and may log request bodies
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def cmd_run(args, config: Dict[str, Any]) -> int:
    """Resolve the service environment, print it masked, and run the command."""
    session = build_session(config)
    table = resolve_environment(
        args.cluster,
        args.service,
        directory=EcsServiceDirectory(session),
        secrets=SsmSecretResolver(session),
        select=select_service,
        strict_secrets=config["strict_secrets"],
    )

    for line in render(table):
        print(line)
    sys.stdout.flush()

    returncode = launch(table, args.command)
    print("DONE")
    return exit_status(returncode)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecs-console",
        description="ECS Console - run commands with environment variables from ECS task definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
  ecs-console --cluster production --service my-service --command "rails c"

Exit codes:
  0   - Command ran and exited successfully
  1   - Runtime error (AWS access, service or task definition not found, etc.)
  2   - Usage error (invalid arguments, unknown cluster, empty command)
  130 - Aborted by interrupt
  Otherwise the command's own exit status is returned.

Environment variables:
  ECS_CONSOLE_CONFIG - Path to config file
  AWS_PROFILE, AWS_REGION - Used when the config leaves aws.profile/aws.region unset

Configuration:
  Default location: ~/.config/ecs-console/config.yml

The command runs with ONLY the task definition's environment; variables of
the current shell (PATH included) are not passed through.
        """
    )
    parser.add_argument(
        "-c", "--cluster",
        help="Cluster name (default: defaults.cluster from config, 'production' built in)"
    )
    parser.add_argument(
        "-s", "--service",
        help="Service name. If not provided, will be prompted to select one"
    )
    parser.add_argument(
        "--command",
        help="Command to run (default: defaults.command from config, 'rails console' built in)"
    )
    parser.add_argument(
        "--config",
        help="Path to config file (overrides ECS_CONSOLE_CONFIG and the default location)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ecs-console {VERSION}"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (AWS access, service not found, etc.)
        2 - Usage errors (invalid arguments, unknown cluster, etc.)
        130 - Aborted by interrupt
        Otherwise the launched command's exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _set_verbosity(args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.cluster is None:
        args.cluster = config["defaults"]["cluster"]
    if args.command is None:
        args.command = config["defaults"]["command"]
    validate_cluster_name(args.cluster, config["clusters"])
    validate_command(args.command)

    try:
        status = cmd_run(args, config)
    except (KeyboardInterrupt, Aborted):
        print("Aborted")
        sys.exit(EXIT_ABORTED)
    except EmptyDirectory as e:
        print(str(e))
        sys.exit(1)
    except (EcsConsoleError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(status)


if __name__ == "__main__":
    main()
