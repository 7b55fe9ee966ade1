"""Entry point: ``python -m colony``.

  - ``python -m colony [serve]``  serve the HTTP API with the room running
  - ``python -m colony cli``      run the room headless and write a replay
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from colony.config import SimulationConfig

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING")


def _room_options() -> argparse.ArgumentParser:
    """Flags shared by both modes."""
    room = argparse.ArgumentParser(add_help=False)
    room.add_argument("--seed", type=int, default=SimulationConfig.world_seed)
    room.add_argument("--harvesters", type=int, default=SimulationConfig.harvester_quota)
    room.add_argument("--builders", type=int, default=SimulationConfig.builder_quota)
    room.add_argument("--annotate-routes", action="store_true", help="log every annotated move at DEBUG")
    room.add_argument("--log-level", default="INFO", choices=_LOG_LEVELS)
    return room


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="colony", description="Colony worker simulation")
    sub = parser.add_subparsers(dest="command")
    room = _room_options()

    serve = sub.add_parser("serve", parents=[room], help="serve the HTTP API (default)")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    cli = sub.add_parser("cli", parents=[room], help="run headless")
    cli.add_argument("--ticks", type=int, default=1000)
    cli.add_argument("--status-interval", type=int, default=SimulationConfig.status_interval)
    cli.add_argument("--replay", default=SimulationConfig.replay_file)
    return parser


def _config_from(args: argparse.Namespace, **extra: Any) -> SimulationConfig:
    return SimulationConfig(
        world_seed=args.seed,
        harvester_quota=args.harvesters,
        builder_quota=args.builders,
        annotate_routes=args.annotate_routes,
        log_level=args.log_level,
        **extra,
    )


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    from colony.api.app import create_app

    app = create_app(_config_from(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _headless(args: argparse.Namespace) -> None:
    from colony.systems.simulation import build_simulation
    from colony.utils.logging import setup_logging
    from colony.utils.replay import ReplayRecorder

    config = _config_from(
        args,
        max_ticks=args.ticks,
        status_interval=args.status_interval,
        replay_file=args.replay,
    )
    setup_logging(config.log_level)

    loop = build_simulation(config, recorder=ReplayRecorder(config.replay_file, config.world_seed))
    loop.run()
    logger.info("Replay of %d ticks written to %s", loop.world.tick, config.replay_file)


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in ("serve", "cli", "-h", "--help"):
        argv.insert(0, "serve")
    args = _build_parser().parse_args(argv)

    if args.command == "cli":
        _headless(args)
    else:
        _serve(args)


if __name__ == "__main__":
    main()
