#!/usr/bin/env python3
"""Export the KeyStore snapshot JSON schema.

--check compares against the committed file instead of writing it, so a model
change without a regenerated schema fails fast.
"""

from __future__ import annotations

import argparse
import json
import pathlib
import sys
from typing import Optional, Sequence

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from keysmith.models.credential import keystore_json_schema  # noqa: E402


def render_schema() -> str:
    return json.dumps(keystore_json_schema(), indent=2, sort_keys=True, ensure_ascii=True) + "\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export keystore snapshot JSON schema")
    parser.add_argument(
        "--out",
        type=pathlib.Path,
        default=None,
        help="Output path (default: <root>/schemas/keystore.schema.json)",
    )
    parser.add_argument("--check", action="store_true", help="Fail if the output file is missing or stale")
    args = parser.parse_args(argv)

    out_path: pathlib.Path = args.out or ROOT / "schemas" / "keystore.schema.json"
    rendered = render_schema()

    if args.check:
        current = out_path.read_text(encoding="utf-8") if out_path.exists() else ""
        if current != rendered:
            print(f"stale keystore schema: {out_path}")
            return 1
        print(f"up to date {out_path}")
        return 0

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(rendered, encoding="utf-8")
    print(f"wrote {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
