"""Lightweight CLI for fetching vApp and VM descriptors."""
# Example:
# python -m client_cli.main --mock --action get_vapp --id vapp-12345678-1234-1234-1234-12345678aaaa

from __future__ import annotations

import logging
import sys
from argparse import (
    ArgumentDefaultsHelpFormatter,
    ArgumentParser,
    RawDescriptionHelpFormatter,
)

from vcd_client import MockVcloudDirectorClient, VcloudDirectorError, client_settings, new_client, set_config
from vcd_client.logging_config import configure_logging
from vcd_client.utils import dict_to_json

log = logging.getLogger("client_cli")


# Combine both formatters to allow newlines and showing default arguments
class RawDescriptionDefaultsHelpFormatter(
    RawDescriptionHelpFormatter,
    ArgumentDefaultsHelpFormatter,
):
    pass


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="vCloud Director vApp/VM client.\n\n"
        "Fetches the descriptor of a vApp or VM by identifier and prints it as JSON.\n"
        "Settings come from config.yaml and VCLOUD_DIRECTOR_* variables; flags override both.\n"
        "To see a demo against the built-in mock data, execute: python -m client_cli.main --action demo",
        formatter_class=RawDescriptionDefaultsHelpFormatter,
    )
    parser.add_argument("--config", default="config.yaml", help="YAML configuration file")
    parser.add_argument("--host", default=None, help="vCloud Director host (scheme optional)")
    parser.add_argument("--username", default=None, help="Login in user@org form")
    parser.add_argument("--password", default=None, help="Login password")
    parser.add_argument("--api-version", default=None, help="vCloud API version")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("--mock", action="store_true", help="Serve requests from the in-memory mock")
    parser.add_argument("--mock-data", default=None, help="YAML fixture for the mock backend")
    parser.add_argument("--id", dest="object_id", default=None, help="vApp or VM identifier")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL or INFO)")
    parser.add_argument(
        "--action",
        choices=["demo", "get_vapp"],
        help="Action to execute",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Optional list of arguments (defaults to ``sys.argv``).

    Returns:
        int: Process exit code (0 on success, non-zero on error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.action is None:
        parser.print_help()
        return 1

    overrides = {
        "host": args.host,
        "username": args.username,
        "password": args.password,
        "api_version": args.api_version,
        "mock_data": args.mock_data,
        "verify_tls": False if args.insecure else None,
        "mock": True if args.mock or args.action == "demo" else None,
    }
    cfg = set_config(args.config, overrides=overrides)

    log.debug("Handling action: %s", args.action)

    try:
        if args.action == "demo":
            client = MockVcloudDirectorClient.from_settings(client_settings(cfg))
            vapp_id = next(iter(client.data.vapps), None)
            if vapp_id is None:
                log.error("Mock dataset holds no vApps")
                return 1
            log.info("Fetching mock vApp %s", vapp_id)
            print(dict_to_json(client.get_vapp(vapp_id).body))
            return 0

        if not args.object_id:
            log.error("--id is required for get_vapp")
            return 1

        with new_client(cfg) as client:
            response = client.get_vapp(args.object_id)
        log.info("Received %s (%s)", args.object_id, response.content_type)
        print(dict_to_json(response.body))
        return 0

    except (VcloudDirectorError, ValueError, OSError) as exc:
        sys.stderr.write(f"Error fetching {args.object_id or 'demo vApp'}: {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
