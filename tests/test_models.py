"""Tests for Vector3, Zone, TickClock and the in-memory world."""

from __future__ import annotations

import unittest

from raidblock.core.clock import TickClock
from raidblock.core.models import Membership, Vector3, Zone
from raidblock.core.world import WorldState


class TestVector3(unittest.TestCase):

    def test_distance_is_euclidean_3d(self):
        self.assertAlmostEqual(Vector3(0, 0, 0).distance(Vector3(2, 3, 6)), 7.0)

    def test_within_is_inclusive(self):
        self.assertTrue(Vector3(0, 0, 0).within(Vector3(0, 0, 5), 5))
        self.assertFalse(Vector3(0, 0, 0).within(Vector3(0, 0, 5.01), 5))

    def test_arithmetic(self):
        self.assertEqual(Vector3(1, 2, 3) + Vector3(1, 1, 1), Vector3(2, 3, 4))
        self.assertEqual(Vector3(1, 2, 3) - Vector3(1, 1, 1), Vector3(0, 1, 2))

    def test_repr(self):
        self.assertEqual(repr(Vector3(1.5, 0, -2)), "(1.5, 0, -2)")


class TestZone(unittest.TestCase):

    def test_lifetime(self):
        zone = Zone(1, Vector3(), created_at=0, expires_at=10)
        self.assertFalse(zone.expired(9))
        self.assertTrue(zone.expired(10))
        self.assertEqual(zone.remaining(4), 6)
        self.assertEqual(zone.remaining(15), 0)

    def test_extend_forward_only(self):
        zone = Zone(1, Vector3(), created_at=0, expires_at=10)
        self.assertFalse(zone.extend_to(8))
        self.assertFalse(zone.extend_to(10))
        self.assertTrue(zone.extend_to(12))
        self.assertEqual(zone.expires_at, 12)

    def test_copy_is_independent(self):
        zone = Zone(1, Vector3(), created_at=0, expires_at=10)
        clone = zone.copy()
        clone.extend_to(20)
        self.assertEqual(zone.expires_at, 10)

    def test_membership_active(self):
        self.assertTrue(Membership("a", 1, 1).active)
        self.assertFalse(Membership("a", 1, 0).active)


class TestTickClock(unittest.TestCase):

    def test_advance(self):
        clock = TickClock(start=5)
        self.assertEqual(clock.advance(), 6)
        self.assertEqual(clock.advance(3), 9)
        self.assertEqual(clock.advance(0), 9)
        self.assertEqual(clock.now, 9)


class TestWorldState(unittest.TestCase):

    def test_liveness(self):
        world = WorldState()
        world.add_entity(1, Vector3())
        world.add_entity(2, Vector3())
        world.set_alive(1, False)
        world.set_connected(2, False)
        self.assertEqual(world.entity_ids(), [])
        self.assertFalse(world.is_live(1))
        self.assertFalse(world.is_live(99))

    def test_upsert_revives_and_moves(self):
        world = WorldState()
        world.add_entity(1, Vector3(), "alice")
        world.set_connected(1, False)
        rec = world.upsert_entity(1, Vector3(5, 0, 0))
        self.assertTrue(rec.live)
        self.assertEqual(rec.name, "alice")
        self.assertEqual(world.position_of(1), Vector3(5, 0, 0))

    def test_unknown_entity_operations(self):
        world = WorldState()
        world.move_entity(1, Vector3(1, 1, 1))
        world.set_alive(1, False)
        self.assertIsNone(world.position_of(1))
        self.assertIsNone(world.remove_entity(1))


if __name__ == "__main__":
    unittest.main()
