"""Launch the scanner HTTP service."""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from fnoscan.config import AppSettings
from fnoscan.logger import setup_logging
from fnoscan.ui import create_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server (default: 8000).",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=None,
        help="Override the directory holding credentials, symbols, and results.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = AppSettings()
    if args.state_dir is not None:
        settings.data_paths.state = args.state_dir.expanduser()
    setup_logging("fnoscan", settings.log_level, settings.log_dir)

    app = create_app(settings)
    uvicorn.run(app, host=args.host, port=args.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
