"""
Command-line interface for the Selenium Grid exporter: serve (default), collect, config, version.
"""
from __future__ import annotations

import argparse
import json
import sys

import config


def _apply_flags(args: argparse.Namespace) -> None:
    """CLI flags override file and environment configuration."""
    if getattr(args, "config", None):
        if not config.load_config_file(args.config):
            print(f"Config file not loaded: {args.config}", file=sys.stderr)
    else:
        config.load_config_file()
    for key, attr in (
        ("hub.url", "hub"),
        ("exporter.port", "port"),
        ("exporter.host", "host"),
        ("hub.timeout_sec", "timeout"),
        ("logging.level", "log_level"),
    ):
        value = getattr(args, attr, None)
        if value is not None:
            config.set_override(key, value)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn
    from rich.console import Console

    from api import create_app
    from version import banner

    Console().print(banner(), highlight=False, markup=False)
    hub = str(config.get("hub.url"))
    host = str(config.get("exporter.host", "0.0.0.0"))
    port = int(config.get("exporter.port", 9000))
    print(f"listening for connections on port {port}")
    uvicorn.run(
        create_app(hub),
        host=host,
        port=port,
        log_level=str(config.get("logging.level", "INFO")).lower(),
    )
    return 0


def cmd_collect(args: argparse.Namespace) -> int:
    from metrics import collect
    from metrics import main as metrics_main
    hub = str(config.get("hub.url"))
    if args.json:
        m = collect(hub)
        print(json.dumps(m.to_dict(), indent=2 if args.pretty else None))
        return 0 if m.accessible else 1
    # Default: rich table
    try:
        metrics_main(hub)
    except SystemExit as e:
        return int(e.code or 0)
    return 0


def cmd_validate_config(args: argparse.Namespace) -> int:
    print("Effective configuration:")
    for key in [
        "hub.url",
        "hub.timeout_sec",
        "hub.status_path",
        "hub.queue_path",
        "exporter.host",
        "exporter.port",
        "exporter.metrics_path",
        "logging.level",
        "logging.file",
    ]:
        print(f"  {key}: {config.get(key)}")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    from version import version_info
    for k, v in version_info().items():
        print(f"{k}: {v}")
    return 0


def _common_flags(default: object) -> argparse.ArgumentParser:
    """Shared flags, accepted both before and after the subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--hub", default=default,
                        help="Full URL of the remote Grid Hub to export metrics from (default http://127.0.0.1:4444)")
    common.add_argument("--port", type=int, default=default,
                        help="Port the exporter will listen on (default 9000)")
    common.add_argument("--host", default=default, help="Address the exporter will bind to")
    common.add_argument("--timeout", type=float, default=default, help="Hub request timeout in seconds")
    common.add_argument("--log-level", default=default, help="Logging level (DEBUG, INFO, WARNING, ...)")
    common.add_argument("--config", default=default, help="Path to a YAML config file")
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-exporter",
        description="A simple exporter to export metrics from Selenium grid clusters.",
        parents=[_common_flags(None)],
    )
    parser.set_defaults(run=cmd_serve)

    # SUPPRESS keeps a subcommand from resetting flags given before it.
    common = _common_flags(argparse.SUPPRESS)
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="Serve Prometheus metrics (default)", parents=[common])
    p_serve.set_defaults(run=cmd_serve)

    p_collect = sub.add_parser("collect", help="Collect metrics once (rich output) or --json", parents=[common])
    p_collect.add_argument("--json", action="store_true", help="Output JSON")
    p_collect.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    p_collect.set_defaults(run=cmd_collect)

    p_validate = sub.add_parser("validate-config", help="Validate and show config", parents=[common])
    p_validate.set_defaults(run=cmd_validate_config)

    p_version = sub.add_parser("version", help="Show version information")
    p_version.set_defaults(run=cmd_version)
    return parser


def main(argv: list[str] | None = None) -> int:
    from utils import setup_logging

    args = build_parser().parse_args(argv)
    _apply_flags(args)
    setup_logging(str(config.get("logging.level", "INFO")), config.get("logging.file"))
    return args.run(args)


if __name__ == "__main__":
    sys.exit(main())
