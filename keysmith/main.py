"""keysmith command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from keysmith.config.settings import SettingsLoadError
from keysmith.core.db import KeyStoreLoadError
from keysmith.core.runtime import KeychainRuntime
from keysmith.entropy.base import EntropyError


def _default_settings_path(workspace_root: Path) -> Path:
    return workspace_root / "config/keysmith.yaml"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keysmith", description="Per-account password keychain")
    parser.add_argument("--config", help="Path to keysmith.yaml (default: <root>/config/keysmith.yaml)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a password for a resource unless one exists")
    gen.add_argument("--account", required=True, help="Caller account id")
    gen.add_argument("--resource", required=True, help="Resource name")
    gen.add_argument("--identifier", required=True, help="Owner label stored with the password")

    get = sub.add_parser("get", help="Print the stored password (empty line if none)")
    get.add_argument("--account", required=True, help="Account id to query")
    get.add_argument("--resource", required=True, help="Resource name")

    sub.add_parser("export", help="Print the keystore snapshot as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    workspace_root = Path(os.getenv("KEYSMITH_ROOT", Path(__file__).resolve().parents[1]))
    settings_path_raw = (args.config or os.getenv("KEYSMITH_CONFIG_PATH", "")).strip()
    if settings_path_raw:
        settings_path = Path(settings_path_raw)
    else:
        settings_path = _default_settings_path(workspace_root)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        runtime = KeychainRuntime(workspace_root=workspace_root, settings_path=settings_path)
    except SettingsLoadError as exc:
        logging.error("startup blocked by invalid settings: %s", exc)
        print(
            "Startup failed: settings are invalid.\n"
            f"- settings: {settings_path}\n"
            f"- detail: {exc}"
        )
        return 2
    except KeyStoreLoadError as exc:
        logging.error("startup blocked by unreadable keystore: %s", exc)
        return 2

    logging.getLogger().setLevel(runtime.settings.logging.level)

    if args.command == "generate":
        try:
            runtime.generate(account_id=args.account, resource=args.resource, identifier=args.identifier)
        except EntropyError as exc:
            logging.error("generation aborted: %s", exc)
            return 3
        return 0
    if args.command == "get":
        print(runtime.get(account_id=args.account, resource=args.resource))
        return 0
    print(runtime.snapshot_json())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
