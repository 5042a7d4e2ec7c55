# Crownix Vault - Command Line Entry Point
#
# Maintenance and development entry for the persistence layer:
# inspect the current vault, export the backup slot, reset the pointer,
# or run the local backend the desktop frontend talks to.

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .core import AuditLogger, PersistencePaths, set_audit_logger
from .desktop import FolderOpener
from .persistence import VaultPersistence, set_vault_persistence


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crownix-vault",
        description="Crownix Vault - vault persistence and recovery tools",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Configuration root (default: per-user config dir or $CROWNIX_CONFIG_DIR)"
    )

    parser.add_argument(
        "--status",
        action="store_true",
        help="Print the startup load outcome as JSON (vault bytes omitted)"
    )

    parser.add_argument(
        "--export-backup",
        metavar="DIR",
        type=Path,
        help="Move the backup slot's content into DIR"
    )

    parser.add_argument(
        "--clear-config",
        action="store_true",
        help="Forget the current vault location"
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the local API backend for the desktop frontend"
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Backend host (only with --serve, default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Backend port (only with --serve, default: 8000)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Crownix Vault v{__version__}"
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the crownix-vault console script."""
    args = _build_parser().parse_args(argv)

    paths = PersistencePaths.from_root(args.config_dir)
    audit = AuditLogger(log_dir=paths.log_dir)
    set_audit_logger(audit)

    persistence = VaultPersistence(
        config_dir=paths.root,
        folder_opener=FolderOpener(),
        audit=audit,
    )
    set_vault_persistence(persistence)

    exit_code = 0

    if args.clear_config:
        result = persistence.clear_configuration()
        print(json.dumps(result.to_dict()))
        exit_code = exit_code or (0 if result.success else 1)

    if args.export_backup is not None:
        result = persistence.export_backup(args.export_backup)
        print(json.dumps(result.to_dict()))
        exit_code = exit_code or (0 if result.success else 1)

    if args.status:
        outcome = persistence.auto_load().to_dict()
        outcome.pop("buffer", None)
        print(json.dumps(outcome, indent=2))

    if args.serve:
        from .api.main import start_api_server

        print(f"Starting Crownix Vault backend on {args.host}:{args.port} (config: {paths.root})")
        try:
            start_api_server(host=args.host, port=args.port)
        except KeyboardInterrupt:
            print("\nShutting down backend...")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
