#!/usr/bin/env python3
"""enc2dhcp command line.

Usage:
    enc2dhcp [--config FILE] [--enc-dir DIR] [--hosts-file FILE] COMMAND

Commands:
    list            Print every managed host stanza
    show HOST       Print the PXE record derived for one host
    hosts           Print the host declarations found in the hosts file
    diff            Show what sync would change
    sync            Update the hosts file
    remove HOST     Remove a host declaration from the hosts file
    lookup HOST     Query the external node classifier
    facts           Print OS capability facts
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .config.settings import ConfigError, Settings
from .dhcp.diff import summarize_diff
from .dhcp.writer import WriteError
from .enc.inventory import HostInventory
from .facts import is_init_systemd, read_os_facts
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _dump(data: Any, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="enc2dhcp",
        description="Generate DHCP/PXE host declarations from ENC records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Preview changes to the hosts file
    enc2dhcp diff

    # Apply them, dropping declarations without an ENC record
    enc2dhcp sync --purge

Environment:
    ENC2DHCP_ENC_DIR, ENC2DHCP_HOSTS_FILE, ENC2DHCP_EXTERNAL_NODES
    ENC2DHCP_LOG_LEVEL, ENC2DHCP_LOG_FILE
""",
    )
    parser.add_argument("--config", type=Path, help="Settings file (YAML)")
    parser.add_argument("--enc-dir", type=Path, help="ENC record directory")
    parser.add_argument("--hosts-file", type=Path, help="DHCP hosts file")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Print managed host stanzas")
    list_cmd.add_argument(
        "--format",
        choices=["text", "yaml", "json"],
        default="text",
        help="Output format (default: text)",
    )

    show_cmd = sub.add_parser("show", help="Print the PXE record for a host")
    show_cmd.add_argument("hostname")
    show_cmd.add_argument("--format", choices=["yaml", "json"], default="yaml")

    hosts_cmd = sub.add_parser("hosts", help="Print parsed hosts file entries")
    hosts_cmd.add_argument("--format", choices=["yaml", "json"], default="yaml")

    diff_cmd = sub.add_parser("diff", help="Show pending changes")
    diff_cmd.add_argument("--purge", action="store_true", help="Include unmanaged entries as deletions")
    diff_cmd.add_argument("--exit-code", action="store_true", help="Exit 1 when changes are pending")

    sync_cmd = sub.add_parser("sync", help="Update the hosts file")
    sync_cmd.add_argument("--purge", action="store_true", help="Delete unmanaged entries")
    sync_cmd.add_argument("--dry-run", action="store_true", help="Print the result instead of writing it")

    remove_cmd = sub.add_parser("remove", help="Remove a host declaration")
    remove_cmd.add_argument("hostname")
    remove_cmd.add_argument("--dry-run", action="store_true", help="Print the result instead of writing it")

    lookup_cmd = sub.add_parser("lookup", help="Query the external node classifier")
    lookup_cmd.add_argument("hostname")
    lookup_cmd.add_argument("--pxe", action="store_true", help="Print the derived PXE record instead")

    facts_cmd = sub.add_parser("facts", help="Print OS capability facts")
    facts_cmd.add_argument("--os-release", type=Path, default=Path("/etc/os-release"))

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.load(args.config)
    if args.enc_dir:
        settings.enc_dir = args.enc_dir
    if args.hosts_file:
        settings.hosts_file = args.hosts_file
    return settings


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)

    if args.command == "facts":
        facts = read_os_facts(args.os_release)
        facts["is_init_systemd"] = is_init_systemd(facts)
        print(_dump(facts, "yaml"))
        return 0

    try:
        settings = load_settings(args)
    except (FileNotFoundError, ConfigError) as e:
        logger.error(str(e))
        return 2

    inventory = HostInventory.from_settings(settings)

    try:
        return _run(args, inventory)
    except WriteError as e:
        logger.error(str(e))
        return 1


def _run(args: argparse.Namespace, inventory: HostInventory) -> int:
    if args.command == "list":
        records = inventory.instances()
        if args.format == "text":
            print("\n\n".join(r.content for r in records))
        else:
            print(_dump([r.to_dict() for r in records], args.format))
        return 0

    if args.command == "show":
        print(_dump(inventory.pxe_for(args.hostname).to_dict(), args.format))
        return 0

    if args.command == "hosts":
        hosts = inventory.parser.parse(inventory.hosts_file)
        print(_dump({k: v.to_dict() for k, v in hosts.items()}, args.format))
        return 0

    if args.command == "diff":
        diff = inventory.diff(purge=args.purge)
        print(summarize_diff(diff))
        return 1 if args.exit_code and not diff.no_change else 0

    if args.command == "sync":
        diff, text = inventory.sync(purge=args.purge, dry_run=args.dry_run)
        if args.dry_run:
            print(text, end="")
        else:
            print(summarize_diff(diff))
        return 0

    if args.command == "remove":
        diff, text = inventory.ensure_absent(args.hostname, dry_run=args.dry_run)
        if args.dry_run:
            print(text, end="")
        elif diff.no_change:
            print(f"{args.hostname} not found in {inventory.hosts_file}")
        else:
            print(summarize_diff(diff))
        return 0

    if args.command == "lookup":
        if args.pxe:
            print(_dump(inventory.classify_pxe(args.hostname).to_dict(), "yaml"))
        else:
            print(_dump(inventory.classify(args.hostname), "yaml"))
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
