#!/usr/bin/env python3
"""Local probe for the now-playing aggregator.

Starts the service (with the MPRIS bridge unless ``--no-mpris``), optionally
submits one command, then prints the now-playing view as JSON every
``--interval`` seconds. Configuration comes from ``NOWPLAYING_*`` variables.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from nowplaying import NowPlayingConfig, NowPlayingService  # noqa: E402
from nowplaying.exceptions import NowPlayingError  # noqa: E402

_LOG = logging.getLogger("nowplaying_probe")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the aggregated now-playing view from local players")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between views (default: 1.0)")
    parser.add_argument("--count", type=int, default=0, help="Number of views to print; 0 runs until interrupted")
    parser.add_argument(
        "--command",
        default=None,
        help="Submit this command (raise, toggle, next, prev, seek) before printing",
    )
    parser.add_argument("--value", default=None, help="Command value (player hint for raise, target ms for seek)")
    parser.add_argument("--no-mpris", action="store_true", help="Do not start the local MPRIS bridge")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides = {"mpris_enabled": False} if args.no_mpris else {}
    try:
        config = NowPlayingConfig.from_env(**overrides)
    except NowPlayingError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    async with NowPlayingService(config) as service:
        if not service.bridge.is_running:
            _LOG.info("MPRIS bridge not running; only reported sources are shown")

        # Let the first projection tick land before the first view.
        await asyncio.sleep(config.mpris_tick_ms / 1000.0)

        if args.command:
            result = await service.submit_command(args.command, args.value)
            print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))

        printed = 0
        while args.count <= 0 or printed < args.count:
            view = service.now_playing()
            print(json.dumps(view.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
            printed += 1
            if args.count > 0 and printed >= args.count:
                break
            await asyncio.sleep(args.interval)
    return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
