"""End-to-end raid scenarios driven through the service and scheduler.

These follow a raid from the first qualifying hit to the moment the last
panel disappears, checking what each player would see along the way.
"""

from __future__ import annotations

import unittest

from raidblock.core.models import Vector3
from tests.helpers.raid_arena import RaidArena


class TestExtendedRaidWithBystander(unittest.TestCase):
    """Raid extended by a nearby hit; a bystander wanders into the zone."""

    def setUp(self):
        self.arena = RaidArena(block_duration=10, zone_radius=50.0, merge_radius=25.0)
        self.arena.add_entity("raider", (0, 0, 0))

    def test_full_timeline(self):
        arena = self.arena
        zone = arena.damage("raider", (0, 0, 0))
        self.assertEqual(zone.expires_at, 10)

        arena.run_ticks(1)
        self.assertEqual(arena.tracker.remaining_in("raider", zone.zone_id), 9)

        # Second hit 10 units away merges into the same zone.
        extended = arena.damage("raider", (10, 0, 0))
        self.assertEqual(extended.zone_id, zone.zone_id)
        self.assertEqual(zone.expires_at, 11)
        self.assertEqual(len(arena.zones), 1)
        self.assertEqual(arena.tracker.remaining_in("raider", zone.zone_id), 10)

        arena.add_entity("bystander", (40, 0, 0))
        arena.run_ticks(1)
        self.assertEqual(arena.tracker.remaining_in("bystander", zone.zone_id), 10)
        self.assertEqual(arena.raid_ui.last("bystander"), 10)

        arena.run_ticks(9)
        self.assertEqual(arena.now, 11)
        self.assertTrue(arena.service.is_restricted("bystander"))
        self.assertEqual(arena.service.remaining("bystander"), 1)
        self.assertFalse(arena.service.is_restricted("raider"))

        report = arena.run_ticks(1)[0]
        self.assertEqual(report.expired_zones, [zone.zone_id])
        self.assertIn(("bystander", zone.zone_id), report.dropped)
        self.assertFalse(arena.service.is_restricted("bystander"))
        self.assertIsNone(arena.raid_ui.last("bystander"))
        self.assertEqual(len(arena.zones), 0)

    def test_bystander_cannot_teleport_while_blocked(self):
        arena = self.arena
        arena.damage("raider", (0, 0, 0))
        arena.add_entity("bystander", (40, 0, 0))
        self.assertTrue(arena.service.on_command_attempt("bystander", "/home base").allowed)

        arena.run_ticks(1)
        decision = arena.service.on_command_attempt("bystander", "/HOME base")
        self.assertFalse(decision.allowed)


class TestOverlappingZones(unittest.TestCase):
    """One player standing in two zones sees the longer countdown."""

    def test_ui_shows_longest_then_falls_back(self):
        arena = RaidArena(block_duration=10, zone_radius=50.0, merge_radius=25.0)
        arena.add_entity(7, (30, 0, 0))
        zone_a, _ = arena.zones.create_or_extend(Vector3(0, 0, 0), 3)
        zone_b, _ = arena.zones.create_or_extend(Vector3(60, 0, 0), 7)
        arena.tracker.add(7, zone_a.zone_id, 3)
        arena.tracker.add(7, zone_b.zone_id, 7)
        self.assertEqual(arena.raid_ui.last(7), 7)

        arena.run_ticks(3)

        self.assertEqual(arena.tracker.zones_of(7), {zone_b.zone_id})
        self.assertEqual(arena.raid_ui.last(7), 4)
        self.assertEqual(arena.service.remaining(7), 4)

        report = arena.run_ticks(1)[0]
        self.assertEqual(report.expired_zones, [zone_a.zone_id])
        self.assertEqual(arena.raid_ui.last(7), 3)


class TestVictimAndDeath(unittest.TestCase):

    def test_victim_blocked_then_released_on_death(self):
        arena = RaidArena()
        arena.add_entity("raider", (0, 0, 0))
        arena.add_entity("owner", (200, 0, 0))
        zone = arena.damage("raider", (0, 0, 0), victim="owner")
        self.assertTrue(arena.service.is_restricted("owner", zone.zone_id))

        # The owner is far away: the next reconcile walks them out, saving time.
        arena.run_ticks(1)
        self.assertFalse(arena.service.is_restricted("owner"))
        self.assertEqual(arena.tracker.saved_time("owner", zone.zone_id), 10)

        arena.service.on_entity_removed("raider", "death")
        self.assertFalse(arena.service.is_restricted("raider"))
        self.assertIsNone(arena.raid_ui.last("raider"))


if __name__ == "__main__":
    unittest.main()
