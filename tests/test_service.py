"""Tests for RaidBlockService event entry points."""

from __future__ import annotations

import unittest

from raidblock.core.enums import RemovalCause, Subsystem
from raidblock.core.models import Vector3
from tests.helpers.raid_arena import RaidArena


class TestQualifyingDamage(unittest.TestCase):

    def setUp(self):
        self.arena = RaidArena()
        self.arena.add_entity("raider", (0, 0, 0))
        self.arena.add_entity("owner", (5, 0, 0))

    def test_initiator_and_victim_are_blocked(self):
        zone = self.arena.damage("raider", (0, 0, 0), victim="owner")
        self.assertTrue(self.arena.service.is_restricted("raider", zone.zone_id))
        self.assertTrue(self.arena.service.is_restricted("owner", zone.zone_id))

    def test_victim_not_blocked_when_disabled(self):
        arena = RaidArena(block_on_receive_raid_damage=False)
        arena.add_entity("raider")
        arena.add_entity("owner", (500, 0, 0))
        arena.damage("raider", (0, 0, 0), victim="owner")
        self.assertFalse(arena.service.is_restricted("owner"))

    def test_self_damage_seeds_once(self):
        self.arena.damage("raider", (0, 0, 0), victim="raider")
        self.assertEqual(len(self.arena.tracker), 1)
        self.assertEqual(self.arena.raid_ui.updates_for("raider"), [10])

    def test_non_live_initiator_is_skipped(self):
        self.arena.world.set_alive("raider", False)
        zone = self.arena.damage("raider", (0, 0, 0))
        self.assertIn(zone.zone_id, self.arena.zones)
        self.assertFalse(self.arena.service.is_restricted("raider"))

    def test_unknown_initiator_still_opens_zone(self):
        zone = self.arena.damage("ghost", (0, 0, 0))
        self.assertIn(zone.zone_id, self.arena.zones)
        self.assertEqual(len(self.arena.tracker), 0)

    def test_retrigger_refreshes_existing_members(self):
        zone = self.arena.damage("raider", (0, 0, 0), victim="owner")
        self.arena.run_ticks(4)
        self.assertEqual(self.arena.service.remaining("owner"), 6)

        self.arena.damage("raider", (3, 0, 0))

        self.assertEqual(self.arena.tracker.remaining_in("owner", zone.zone_id), 10)
        self.assertEqual(self.arena.tracker.remaining_in("raider", zone.zone_id), 10)

    def test_new_zone_does_not_touch_other_zones(self):
        first = self.arena.damage("raider", (0, 0, 0), victim="owner")
        self.arena.run_ticks(2)
        second = self.arena.damage("raider", (300, 0, 0))
        self.assertNotEqual(first.zone_id, second.zone_id)
        self.assertEqual(self.arena.tracker.remaining_in("owner", first.zone_id), 8)


class TestEntityRemoved(unittest.TestCase):

    def setUp(self):
        self.arena = RaidArena()
        self.arena.add_entity("a", (0, 0, 0))
        self.arena.add_entity("b", (2, 0, 0))

    def test_disconnect_releases_everything(self):
        zone = self.arena.damage("a", (0, 0, 0))
        self.arena.service.on_player_damage("a", "b")
        self.arena.tracker.remove("a", zone.zone_id, save_time=True)
        self.assertEqual(self.arena.tracker.saved_time("a", zone.zone_id), 10)

        self.arena.service.on_entity_removed("a", RemovalCause.DISCONNECT)

        self.assertFalse(self.arena.service.is_restricted("a"))
        self.assertEqual(self.arena.service.combat_remaining("a"), 0)
        self.assertIsNone(self.arena.tracker.saved_time("a", zone.zone_id))
        self.assertNotIn("a", self.arena.world.entities)
        self.assertIsNone(self.arena.raid_ui.last("a"))
        self.assertIsNone(self.arena.combat_ui.last("a"))

    def test_death_removes_blocks_by_default(self):
        self.arena.damage("a", (0, 0, 0))
        self.arena.service.on_player_damage("b", "a")
        self.arena.service.on_entity_removed("a", "death")
        self.assertFalse(self.arena.service.is_restricted("a"))
        self.assertEqual(self.arena.service.combat_remaining("a"), 0)

    def test_death_keeps_blocks_when_configured(self):
        arena = RaidArena(remove_block_on_death=False, combat_remove_block_on_death=False)
        arena.add_entity("a")
        arena.add_entity("b", (2, 0, 0))
        arena.damage("a", (0, 0, 0))
        arena.service.on_player_damage("b", "a")

        arena.service.on_entity_removed("a", RemovalCause.DEATH)
        arena.run_ticks(1)

        self.assertTrue(arena.service.is_restricted("a"))
        self.assertEqual(arena.service.combat_remaining("a"), 4)

    def test_death_policies_are_independent(self):
        arena = RaidArena(remove_block_on_death=True, combat_remove_block_on_death=False)
        arena.add_entity("a")
        arena.add_entity("b", (2, 0, 0))
        arena.damage("a", (0, 0, 0))
        arena.service.on_player_damage("b", "a")

        arena.service.on_entity_removed("a", "death")

        self.assertFalse(arena.service.is_restricted("a"))
        self.assertTrue(arena.service.combat.is_restricted("a"))

    def test_unknown_entity_is_a_noop(self):
        self.arena.service.on_entity_removed("ghost", "disconnect")
        self.arena.service.on_entity_removed("ghost", "death")
        self.assertEqual(self.arena.raid_ui.calls, [])

    def test_unknown_cause_raises(self):
        with self.assertRaises(ValueError):
            self.arena.service.on_entity_removed("a", "teleported")


class TestCommandAttempt(unittest.TestCase):

    def setUp(self):
        self.arena = RaidArena()
        self.arena.add_entity(1)
        self.arena.add_entity(2, (3, 0, 0))

    def test_unrestricted_entity_may_teleport(self):
        self.assertTrue(self.arena.service.on_command_attempt(1, "/home").allowed)

    def test_raid_block_denies_blocked_prefix(self):
        self.arena.damage(1, (0, 0, 0))
        decision = self.arena.service.on_command_attempt(1, "/TPR friend")
        self.assertFalse(decision.allowed)
        self.assertIs(decision.denied_by, Subsystem.RAID)

    def test_command_without_slash_is_matched(self):
        self.arena.damage(1, (0, 0, 0))
        self.assertFalse(self.arena.service.on_command_attempt(1, "  tpa bob").allowed)

    def test_unlisted_command_allowed_while_blocked(self):
        self.arena.damage(1, (0, 0, 0))
        self.assertTrue(self.arena.service.on_command_attempt(1, "/kit").allowed)

    def test_empty_command_allowed(self):
        self.arena.damage(1, (0, 0, 0))
        self.assertTrue(self.arena.service.on_command_attempt(1, "").allowed)

    def test_combat_block_denies(self):
        self.arena.service.on_player_damage(1, 2)
        decision = self.arena.service.on_command_attempt(2, "/home")
        self.assertFalse(decision.allowed)
        self.assertIs(decision.denied_by, Subsystem.COMBAT)

    def test_raid_checked_before_combat(self):
        self.arena.damage(1, (0, 0, 0))
        self.arena.service.on_player_damage(2, 1)
        self.assertIs(self.arena.service.on_command_attempt(1, "/home").denied_by, Subsystem.RAID)

    def test_custom_blocklist(self):
        arena = RaidArena(blocked_commands=("/warp",))
        arena.add_entity(1)
        arena.damage(1, (0, 0, 0))
        self.assertTrue(arena.service.on_command_attempt(1, "/home").allowed)
        self.assertFalse(arena.service.on_command_attempt(1, "/warp spawn").allowed)


class TestBuildAttempt(unittest.TestCase):

    def setUp(self):
        self.arena = RaidArena()
        self.arena.add_entity(1)
        self.zone = self.arena.damage(1, (0, 0, 0))

    def test_build_inside_zone_denied(self):
        decision = self.arena.service.on_build_attempt(1, Vector3(10, 0, 0))
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.zone_ids, frozenset({self.zone.zone_id}))

    def test_upgrade_inside_zone_denied(self):
        self.assertFalse(self.arena.service.on_upgrade_attempt(1, Vector3(0, 5, 0)).allowed)

    def test_build_outside_zone_allowed(self):
        decision = self.arena.service.on_build_attempt(1, Vector3(100, 0, 0))
        self.assertTrue(decision.allowed)
        self.assertEqual(decision.zone_ids, frozenset())

    def test_build_denied_for_bystander_too(self):
        self.assertFalse(self.arena.service.on_build_attempt("someone-else", Vector3(1, 1, 1)).allowed)

    def test_build_allowed_after_zone_expires(self):
        self.arena.run_ticks(10)
        self.assertTrue(self.arena.service.on_build_attempt(1, Vector3(0, 0, 0)).allowed)


class TestReset(unittest.TestCase):

    def test_reset_clears_all_state(self):
        arena = RaidArena()
        arena.add_entity(1)
        arena.add_entity(2, (1, 0, 0))
        arena.damage(1, (0, 0, 0))
        arena.service.on_player_damage(1, 2)

        arena.service.reset()

        self.assertEqual(len(arena.zones), 0)
        self.assertEqual(len(arena.tracker), 0)
        self.assertEqual(len(arena.service.combat), 0)
        self.assertIsNone(arena.raid_ui.last(1))
        self.assertIsNone(arena.combat_ui.last(2))


if __name__ == "__main__":
    unittest.main()
