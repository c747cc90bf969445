"""Entry point: ``python -m deeptime``.

Supports two modes:
  - ``python -m deeptime``         → Launch the FastAPI server with the frame loop
  - ``python -m deeptime demo``    → Headless transition + placement run on a simulated clock
"""

from __future__ import annotations

import argparse
import asyncio
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deep Time AR core")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--duration", type=float, default=1500.0, help="Transition duration in ms")
    srv.add_argument("--fps", type=float, default=60.0)
    srv.add_argument("--catalog", type=str, default="", help="Creature manifest JSON")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless demo mode ---
    demo = sub.add_parser("demo", help="Run one transition headless on a simulated clock")
    demo.add_argument("--seed", type=int, default=42)
    demo.add_argument("--duration", type=float, default=1500.0)
    demo.add_argument("--frame-ms", type=float, default=16.0)
    demo.add_argument("--from-era", type=str, default="Cenozoic")
    demo.add_argument("--to-era", type=str, default="Mesozoic")
    demo.add_argument("--ground-y", type=float, default=0.0)
    demo.add_argument("--catalog", type=str, default="")
    demo.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _make_config(args: argparse.Namespace, frame_interval: float):
    from deeptime.config import DeepTimeConfig, TransitionTiming

    return DeepTimeConfig(
        transition=TransitionTiming(duration_ms=args.duration),
        placement_seed=args.seed,
        frame_interval_seconds=frame_interval,
        catalog_path=args.catalog,
        log_level=args.log_level,
    )


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from deeptime.api.app import create_app

    config = _make_config(args, 1.0 / max(1.0, args.fps))
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


async def _demo(args: argparse.Namespace) -> None:
    from deeptime.api.scene_manager import SceneManager
    from deeptime.core.catalog import DEFAULT_ERAS
    from deeptime.core.enums import Direction, Phase
    from deeptime.core.models import Era

    eras = {e.name: e for e in DEFAULT_ERAS}
    source = eras.get(args.from_era) or Era(name=args.from_era, years_ago=0)
    target = eras.get(args.to_era) or Era(name=args.to_era, years_ago=0)

    clock = [0.0]
    config = _make_config(args, args.frame_ms / 1000.0)
    manager = SceneManager(config, clock=lambda: clock[0])
    manager.set_ground_y(args.ground_y)
    manager.set_current_era(source)

    future = manager.start_transition(target, Direction.PAST)
    phase = manager.machine.phase
    while phase != Phase.IDLE:
        clock[0] += args.frame_ms
        phase = await manager.tick()
    await future

    logger.info(
        "Arrived in %s after %.0f ms (%s, %s)",
        target.name, clock[0], manager.machine.effect.name, manager.machine.direction.name,
    )
    for placed in manager.placed:
        logger.info("  %-16s at %s", placed.id, placed.position)
    logger.info("Distribution valid: %s", manager.validate())


def _run_demo(args: argparse.Namespace) -> None:
    from deeptime.utils.logging import setup_logging

    setup_logging(args.log_level)
    asyncio.run(_demo(args))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "demo":
        _run_demo(args)


if __name__ == "__main__":
    main()
