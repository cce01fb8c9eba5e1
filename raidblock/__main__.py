"""Entry point: ``python -m raidblock``.

Supports two modes:
  - ``python -m raidblock``            → Launch FastAPI server with the tick loop
  - ``python -m raidblock cli``        → Headless scripted raid simulation
"""

from __future__ import annotations

import argparse
import dataclasses
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Raid-zone restriction engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--config", type=str, default=None, help="Path to a JSON config file")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless scripted raid")
    cli.add_argument("--config", type=str, default=None, help="Path to a JSON config file")
    cli.add_argument("--ticks", type=int, default=40)
    cli.add_argument("--duration", type=int, default=None, help="Override block duration (ticks)")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from raidblock.api.app import create_app
    from raidblock.config import load_config

    config = dataclasses.replace(load_config(args.config), log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from raidblock.config import load_config
    from raidblock.core.enums import RemovalCause
    from raidblock.core.models import Vector3
    from raidblock.core.notifier import LoggingNotifier
    from raidblock.core.world import WorldState
    from raidblock.engine.service import RaidBlockService
    from raidblock.utils.logging import setup_logging

    config = load_config(args.config)
    overrides: dict = {"log_level": args.log_level}
    if args.duration is not None and args.duration > 0:
        overrides["block_duration"] = args.duration
    config = dataclasses.replace(config, **overrides)

    setup_logging(config.log_level)

    world = WorldState()
    service = RaidBlockService(
        config,
        world=world,
        raid_notifier=LoggingNotifier("raid"),
        combat_notifier=LoggingNotifier("combat"),
    )

    base = Vector3(0.0, 0.0, 0.0)
    raider, owner, bystander, runner = 1, 2, 3, 4
    world.add_entity(raider, base + Vector3(5.0, 0.0, 0.0), "raider")
    world.add_entity(owner, base + Vector3(-5.0, 0.0, 0.0), "owner")
    world.add_entity(bystander, base + Vector3(config.zone_radius * 0.8, 0.0, 0.0), "bystander")
    world.add_entity(runner, base, "runner")

    logger.info("=== Scripted raid started (duration=%d, zone_radius=%.1f) ===",
                config.block_duration, config.zone_radius)

    for _ in range(args.ticks):
        tick = service.now

        # Two walls go down a few ticks apart, the second close enough to merge.
        if tick == 0:
            service.on_qualifying_damage(raider, owner, base)
            service.on_player_damage(owner, raider)
        elif tick == 3:
            service.on_qualifying_damage(raider, None, base + Vector3(config.merge_radius / 2, 0.0, 0.0))

        # The runner steps out of the zone and back in.
        if tick == 5:
            world.move_entity(runner, base + Vector3(config.zone_radius * 3, 0.0, 0.0))
        elif tick == 10:
            world.move_entity(runner, base)

        if tick == 12:
            service.on_entity_removed(owner, RemovalCause.DEATH)

        decision = service.on_command_attempt(raider, "/home")
        report = service.tick()

        if not report.quiet or tick % 10 == 0:
            logger.info(
                "Tick %d: zones=%d restricted=%s raider=%d runner=%d home=%s",
                report.tick,
                len(service.zones),
                sorted(e for e in world.entities if service.is_restricted(e)),
                service.remaining(raider),
                service.remaining(runner),
                "allowed" if decision.allowed else f"denied ({decision.denied_by.name.lower()})",
            )

    logger.info("=== Scripted raid finished at tick %d ===", service.now)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
