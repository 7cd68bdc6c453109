"""
CLI App - Main entry point for the marathon2consul command line tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from marathon2consul import __version__
from marathon2consul.adapters import ConsulAdapter, EnvironmentConfigProvider, MarathonAdapter
from marathon2consul.application import SyncOrchestrator
from marathon2consul.core.exceptions import DefinitionError
from marathon2consul.core.ports.orchestrator import OrchestratorError

from .exit_codes import ExitCode
from .logging import get_logger, setup_logging
from .output import Console


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for marathon2consul.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="marathon2consul",
        description="Register a Marathon application's ports as Consul services",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview the registrations of an app (dry-run is the default)
  marathon2consul --app-id /prod/web --marathon-url http://marathon.mesos:8080

  # Register them with the local Consul agent
  marathon2consul -a /prod/web -x

  # Override the host port of the first port definition
  marathon2consul -a /prod/web -p 0=31005 -x

  # Remove the registrations when the task stops
  marathon2consul -a /prod/web --deregister -x

  # Machine readable plan
  marathon2consul -a /prod/web --output json

Environment:
  MARATHON_URL, MARATHON_USERNAME, MARATHON_PASSWORD, MARATHON_TOKEN,
  MARATHON_APP_ID, CONSUL_HTTP_ADDR, CONSUL_HTTP_TOKEN, CONSUL_DATACENTER,
  PORT_OVERRIDES (e.g. "0=31005,1=31006")
        """,
    )

    # Target
    parser.add_argument("--app-id", "-a", type=str, help="Marathon application id (e.g. /prod/web)")
    parser.add_argument("--marathon-url", type=str, help="Marathon base URL")
    parser.add_argument("--consul-url", type=str, help="Consul agent address")
    parser.add_argument("--consul-token", type=str, help="Consul ACL token")
    parser.add_argument(
        "--port-override",
        "-p",
        dest="port_overrides",
        action="append",
        metavar="INDEX=PORT",
        help="Replace the port of the port definition at INDEX (repeatable)",
    )
    parser.add_argument(
        "--config", "-c", type=str, help="Config file (.yaml, .yml or .toml)"
    )

    # Execution
    parser.add_argument(
        "--execute",
        "-x",
        action="store_true",
        help="Apply changes to Consul (default is dry-run)",
    )
    parser.add_argument(
        "--deregister",
        action="store_true",
        help="Deregister the application's services instead of registering them",
    )

    # Output
    parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only print errors and a one-line summary"
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log format (default: text)",
    )
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def run_sync(console: Console, args: argparse.Namespace) -> int:
    """
    Run the register (or deregister) workflow for one application.

    Args:
        console: Console instance for output.
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    config_file = Path(args.config) if args.config else None
    config_provider = EnvironmentConfigProvider(
        config_file=config_file,
        cli_overrides=vars(args),
    )
    errors = config_provider.validate()

    if errors:
        console.config_errors(errors)
        return ExitCode.CONFIG_ERROR

    config = config_provider.load()
    app_id = config.sync.app_id
    dry_run = config.sync.dry_run
    logger = get_logger("marathon2consul.cli", app_id=app_id, dry_run=dry_run)

    console.header(f"marathon2consul {__version__}")
    if dry_run:
        console.dry_run_banner()

    if config_provider.config_file_path:
        console.info(f"Config: {config_provider.config_file_path}")
    console.info(f"Application: {app_id}")
    console.info(f"Marathon: {config.marathon.url}")
    console.info(f"Consul: {config.consul.url}")
    if config.sync.port_overrides:
        overrides = ", ".join(f"{i}={p}" for i, p in sorted(config.sync.port_overrides.items()))
        console.info(f"Port overrides: {overrides}")

    marathon = MarathonAdapter(config=config.marathon)
    registry = ConsulAdapter(config=config.consul, dry_run=dry_run)

    logger.info("Starting run")
    console.section("Connecting")
    if not marathon.test_connection():
        console.connection_error(marathon.name, config.marathon.url)
        return ExitCode.CONNECTION_ERROR
    console.success(f"Connected to {marathon.name}")

    # Dry-run never writes to Consul, so the agent may be absent
    if not dry_run:
        if not registry.test_connection():
            console.connection_error(registry.name, config.consul.url)
            return ExitCode.CONNECTION_ERROR
        console.success(f"Connected to {registry.name}")

    orchestrator = SyncOrchestrator(marathon, registry, config.sync)

    if dry_run and not args.deregister:
        try:
            plan = orchestrator.plan(app_id)
        except (OrchestratorError, DefinitionError) as e:
            logger.error(f"Planning failed: {e}")
            console.error(str(e))
            console.flush_errors()
            return ExitCode.from_exception(e)
        console.registrations(plan)
        return ExitCode.SUCCESS

    console.section("Deregistering" if args.deregister else "Registering")
    if args.deregister:
        result = orchestrator.deregister(app_id)
    else:
        result = orchestrator.sync(
            app_id,
            progress_callback=lambda service_id, i, total: console.debug(
                f"[{i}/{total}] {service_id}"
            ),
        )

    logger.info(
        "Run finished",
        extra={
            "success": result.success,
            "registered": result.services_registered,
            "deregistered": result.services_deregistered,
            "failed": len(result.failed_operations),
        },
    )
    console.sync_result(result)

    if result.success:
        return ExitCode.SUCCESS
    if result.partial_success:
        return ExitCode.PARTIAL_SUCCESS
    return ExitCode.ERROR


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the marathon2consul CLI.

    Args:
        argv: Arguments to parse; defaults to sys.argv.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet or args.output == "json":
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    setup_logging(level=log_level, log_format=args.log_format, log_file=args.log_file)

    console = Console(
        color=not args.no_color,
        verbose=args.verbose,
        quiet=args.quiet,
        json_mode=args.output == "json",
    )

    try:
        return run_sync(console, args)

    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted by user")
        return ExitCode.CANCELLED

    except Exception as e:
        console.error(str(e))
        console.flush_errors()
        if args.verbose:
            import traceback

            console.print()
            traceback.print_exc()
        return ExitCode.from_exception(e)


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
