"""Raid/combat block configuration with sensible defaults.

``RaidBlockConfig`` is a frozen pydantic dataclass, so a config built in code
is validated on construction.  ``config_from_dict`` validates a parsed JSON
mapping one field at a time and falls back to the default for any field that
fails, logging a warning instead of rejecting the whole file.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Annotated, Any, get_type_hints

from pydantic import AfterValidator, Field, Strict, TypeAdapter, ValidationError
from pydantic.dataclasses import dataclass as pydantic_dataclass

logger = logging.getLogger(__name__)


def _drop_empty(commands: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(c for c in commands if c)


PositiveTicks = Annotated[int, Strict(), Field(gt=0)]
PositiveFloat = Annotated[float, Strict(), Field(gt=0)]
Flag = Annotated[bool, Strict()]
CommandList = Annotated[tuple[str, ...], AfterValidator(_drop_empty)]


@pydantic_dataclass(frozen=True)
class RaidBlockConfig:
    """Immutable configuration for both restriction subsystems.

    Durations are in ticks; one tick is one second of game time.
    """

    # Raid block
    block_duration: PositiveTicks = 300
    zone_radius: PositiveFloat = 25.0         # Containment distance from a zone center
    merge_radius: PositiveFloat = 25.0        # Triggers closer than this extend the same zone
    block_on_receive_raid_damage: Flag = True
    remove_block_on_death: Flag = True
    blocked_commands: CommandList = ("/tpr", "/tpa", "/home")

    # Combat block
    combat_block_duration: PositiveTicks = 10
    combat_block_on_player_hit: Flag = True
    combat_block_on_receive_damage: Flag = True
    combat_remove_block_on_death: Flag = True
    combat_blocked_commands: CommandList = ("/tpr", "/tpa", "/home")

    # Engine
    tick_rate: PositiveFloat = 1.0            # Wall-clock seconds between ticks (server mode)
    event_log_limit: PositiveTicks = 5000

    # Logging
    log_level: str = "INFO"


_DEFAULTS = RaidBlockConfig()
_HINTS = get_type_hints(RaidBlockConfig, include_extras=True)
_FIELD_ADAPTERS: dict[str, TypeAdapter] = {
    f.name: TypeAdapter(_HINTS[f.name]) for f in dataclasses.fields(RaidBlockConfig)
}
_CONFIG_ADAPTER = TypeAdapter(RaidBlockConfig)


def config_from_dict(data: dict[str, Any]) -> RaidBlockConfig:
    """Build a config from a plain mapping (e.g. parsed JSON).

    Unknown keys are ignored and invalid values replaced by their defaults,
    each with a WARNING.
    """
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        adapter = _FIELD_ADAPTERS.get(key)
        if adapter is None:
            logger.warning("Unknown config key %r ignored", key)
            continue
        try:
            kwargs[key] = adapter.validate_python(value)
        except ValidationError as exc:
            default = getattr(_DEFAULTS, key)
            logger.warning(
                "Config %s=%r is invalid (%s); using %r",
                key, value, exc.errors()[0]["msg"], default,
            )
    return RaidBlockConfig(**kwargs)


def load_config(path: str | Path | None) -> RaidBlockConfig:
    """Read a JSON config file. A missing file yields the defaults."""
    if path is None:
        return RaidBlockConfig()
    p = Path(path)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return RaidBlockConfig()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("Invalid config file %s (%s); using defaults", p, exc)
        return RaidBlockConfig()
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object; using defaults", p)
        return RaidBlockConfig()
    return config_from_dict(data)


def save_config(config: RaidBlockConfig, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(_CONFIG_ADAPTER.dump_json(config, indent=2))
