"""CLI main module with subcommands for inspect, convert, and affine.

Usage:
    python -m coordnet.cli inspect --config net.yaml
    python -m coordnet.cli convert --config net.yaml --from a --to c --vec 0 0 0
    python -m coordnet.cli affine --config net.yaml --from a --to c --homogeneous
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..core.config import build_network, load_config, load_state
from ..core.errors import CoordinateNetworkError
from ..core.logging import get_logger, setup_logging
from ..network.network import CoordinateNetwork

logger = get_logger(__name__)


def _load_network(args: argparse.Namespace) -> CoordinateNetwork:
    net = build_network(load_config(args.config))
    if getattr(args, "state", None):
        net.update(load_state(args.state))
    return net


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the systems of a network and every compiled route."""
    try:
        config = load_config(args.config)
        net = build_network(config)
    except (CoordinateNetworkError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Network Summary:")
    print("-" * 40)
    print("  Systems:     ", len(net))
    print("  Connections: ", len(config.connections))
    print()

    print("Routes:")
    print("-" * 40)
    for start in net.names:
        system = net.systems[start]
        for end in net.names:
            if end == start:
                continue
            stream = system.downstream.get(end)
            route = " -> ".join([start, *stream]) if stream is not None else "unreachable"
            print(f"  {start} to {end}: {route}")
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    """Print a position vector expressed in another system as JSON."""
    try:
        net = _load_network(args)
        vec = net.transform_vec(args.vec, args.start, args.end)
    except (CoordinateNetworkError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"from": args.start, "to": args.end, "vec": vec.tolist()}))
    return 0


def cmd_affine(args: argparse.Namespace) -> int:
    """Print the affine (or homogeneous) map between two systems as JSON."""
    try:
        net = _load_network(args)
        if args.homogeneous:
            data = net.get_homogeneous(args.start, args.end).tolist()
        else:
            data = net.get_affine(args.start, args.end).to_dict()
    except (CoordinateNetworkError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(data))
    return 0


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to YAML/JSON network config file",
    )


def _add_route_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--from", dest="start", required=True, help="Start system name")
    parser.add_argument("--to", dest="end", required=True, help="End system name")
    parser.add_argument(
        "--state",
        "-s",
        type=Path,
        default=None,
        help="Optional YAML/JSON file with dynamic state applied before the query",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coordnet",
        description="Coordinate transform network CLI",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional JSON lines log file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug messages",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # Inspect subcommand
    parser_inspect = subparsers.add_parser(
        "inspect",
        help="List systems and compiled routes of a network",
    )
    _add_config_argument(parser_inspect)
    parser_inspect.set_defaults(func=cmd_inspect)

    # Convert subcommand
    parser_convert = subparsers.add_parser(
        "convert",
        help="Transform a position vector between two systems",
    )
    _add_config_argument(parser_convert)
    _add_route_arguments(parser_convert)
    parser_convert.add_argument(
        "--vec",
        type=float,
        nargs=3,
        required=True,
        metavar=("X", "Y", "Z"),
        help="Position vector in the start system",
    )
    parser_convert.set_defaults(func=cmd_convert)

    # Affine subcommand
    parser_affine = subparsers.add_parser(
        "affine",
        help="Print the affine map between two systems",
    )
    _add_config_argument(parser_affine)
    _add_route_arguments(parser_affine)
    parser_affine.add_argument(
        "--homogeneous",
        action="store_true",
        help="Print the 4x4 homogeneous matrix instead of {A, b}",
    )
    parser_affine.set_defaults(func=cmd_affine)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.WARNING)
    log = logger.bind(command=args.command)
    log.debug("Running command", {"config": str(args.config)})
    code = int(args.func(args) or 0)
    log.debug("Command finished", {"exit_code": code})
    return code


if __name__ == "__main__":
    sys.exit(main())
