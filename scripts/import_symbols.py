"""Replace the saved symbol universe with the symbols listed in a text file."""

from __future__ import annotations

import argparse
from pathlib import Path

from fnoscan.config import AppSettings
from fnoscan.data.stores import JsonFileKeyValueStore
from fnoscan.data.universe import parse_symbol_text
from fnoscan.state import SymbolUniverseStore


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", type=Path, help="Text file with one symbol per line.")
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=None,
        help="Override the directory holding scanner state.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = AppSettings()
    if args.state_dir is not None:
        settings.data_paths.state = args.state_dir.expanduser()
    settings.data_paths.ensure()

    symbols = parse_symbol_text(args.source.read_text(encoding="utf-8"))
    store = SymbolUniverseStore(JsonFileKeyValueStore(settings.data_paths.state))
    saved = store.save(symbols)
    print(f"Saved {len(saved)} symbols to {settings.data_paths.state}")


if __name__ == "__main__":
    main()
