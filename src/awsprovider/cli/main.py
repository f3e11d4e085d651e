"""
Main CLI module with argument parsing and command execution.

This module provides the ``awsprovider`` command:
- ``sweep``: delete leftover resources in one or more regions
- ``list-sweepers``: show registered sweepers in execution order
"""
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from awsprovider._version import __version__
from awsprovider.config import ConfigurationManager
from awsprovider.config.schemas.logging_schema import LoggingConfig
from awsprovider.domain.core.exceptions import DomainException
from awsprovider.infrastructure.error import MultiError
from awsprovider.infrastructure.exceptions import InfrastructureError
from awsprovider.infrastructure.logging import get_logger, setup_logging
from awsprovider.providers.aws.registration import register_aws_sweepers
from awsprovider.providers.aws.sweep import configure_sweep_orchestrator, get_sweeper_registry


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="awsprovider",
        description="AWS provider core - resource sweepers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list-sweepers                                  # List sweepers in execution order
  %(prog)s sweep --region us-west-2                       # Run every sweeper in us-west-2
  %(prog)s sweep --region us-east-1,us-west-2 --sweepers aws_sqs_queue
        """
    )

    # Global options
    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--format', choices=['json', 'text'], default='text', help='Output format')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    sweep = subparsers.add_parser('sweep', help='Delete leftover resources')
    sweep.add_argument('--region', help='Comma separated regions (default: sweeper.regions or SWEEP)')
    sweep.add_argument('--sweepers', help='Comma separated sweeper names (default: all)')

    subparsers.add_parser('list-sweepers', help='List registered sweepers')

    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace, config: ConfigurationManager) -> None:
    logging_config = config.logging
    if args.log_level:
        logging_config = LoggingConfig(**{**logging_config.model_dump(), "level": args.log_level})
    setup_logging(logging_config)


def list_sweepers() -> Dict[str, Any]:
    registry = get_sweeper_registry()
    return {
        "sweepers": [
            {"name": name, "dependencies": list(registry.get(name).dependencies)}
            for name in registry.execution_order()
        ]
    }


def sweep(args: argparse.Namespace, config: ConfigurationManager) -> Dict[str, Any]:
    """
    Run sweepers in every requested region.

    Raises:
        ValueError: If no region is given on the command line or in configuration
    """
    logger = get_logger(__name__)
    regions = _split_csv(args.region) or config.sweeper.regions
    if not regions:
        raise ValueError("no region to sweep: pass --region or set the SWEEP environment variable")
    names = _split_csv(args.sweepers) or None

    configure_sweep_orchestrator(
        throttling_retry_timeout=config.sweeper.throttling_retry_timeout,
        max_workers=config.sweeper.max_workers,
    )

    registry = get_sweeper_registry()
    results: Dict[str, Any] = {}
    for region in regions:
        logger.info("Sweeping region", region=region, sweepers=names or "all")
        try:
            registry.run(region, names)
        except MultiError as err:
            results[region] = {"status": "failed", "errors": [str(e) for e in err.errors]}
            continue
        results[region] = {"status": "succeeded", "errors": []}
    return {"regions": results}


def format_output(result: Dict[str, Any], output_format: str) -> str:
    if output_format == 'json':
        return json.dumps(result, indent=2)

    lines = []
    if "sweepers" in result:
        for sweeper in result["sweepers"]:
            dependencies = ", ".join(sweeper["dependencies"])
            lines.append(f"{sweeper['name']}" + (f" (after {dependencies})" if dependencies else ""))
    for region, outcome in result.get("regions", {}).items():
        lines.append(f"{region}: {outcome['status']}")
        lines.extend(f"  * {error}" for error in outcome["errors"])
    return "\n".join(lines)


def execute_command(args: argparse.Namespace, config: ConfigurationManager) -> Dict[str, Any]:
    register_aws_sweepers()
    if args.command == 'list-sweepers':
        return list_sweepers()
    if args.command == 'sweep':
        return sweep(args, config)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point; returns the process exit code."""
    args = parse_args(argv)

    if not args.command:
        print("Error: No command specified. Use --help for usage information.")
        return 1

    try:
        config = ConfigurationManager(args.config)
        _configure_logging(args, config)
    except (DomainException, InfrastructureError) as e:
        print(f"Error: {e}")
        return 1

    logger = get_logger(__name__)
    try:
        result = execute_command(args, config)
    except (DomainException, InfrastructureError, ValueError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 130

    print(format_output(result, args.format))
    failed = [region for region, outcome in result.get("regions", {}).items() if outcome["status"] != "succeeded"]
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
