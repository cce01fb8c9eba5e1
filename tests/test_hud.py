"""Tests for HudBoard panel placement and the PanelNotifier bridge."""

from __future__ import annotations

import unittest

from raidblock.config import RaidBlockConfig
from raidblock.core.enums import PanelSlot, Subsystem
from raidblock.core.world import WorldState
from raidblock.core.models import Vector3
from raidblock.engine.service import RaidBlockService
from raidblock.hud import SLOT_ANCHORS, HudBoard


class TestHudBoard(unittest.TestCase):

    def setUp(self):
        self.board = HudBoard({Subsystem.RAID: 300, Subsystem.COMBAT: 10})

    def test_combat_panel_alone_uses_primary_slot(self):
        self.board.show(1, Subsystem.COMBAT, 5)
        self.assertEqual(self.board.slot_for(1, Subsystem.COMBAT), PanelSlot.PRIMARY)
        view = self.board.views(1)[0]
        self.assertEqual((view.anchor_min, view.anchor_max), SLOT_ANCHORS[PanelSlot.PRIMARY])

    def test_combat_panel_raised_above_raid_panel(self):
        self.board.show(1, Subsystem.RAID, 120)
        self.board.show(1, Subsystem.COMBAT, 5)
        self.assertEqual(self.board.slot_for(1, Subsystem.COMBAT), PanelSlot.RAISED)
        self.assertEqual(self.board.slot_for(1, Subsystem.RAID), PanelSlot.PRIMARY)
        slots = {v.subsystem: v.slot for v in self.board.views(1)}
        self.assertEqual(slots, {Subsystem.RAID: PanelSlot.PRIMARY, Subsystem.COMBAT: PanelSlot.RAISED})

    def test_combat_panel_drops_back_when_raid_panel_hidden(self):
        self.board.show(1, Subsystem.RAID, 120)
        self.board.show(1, Subsystem.COMBAT, 5)
        self.board.hide(1, Subsystem.RAID)
        self.assertEqual(self.board.slot_for(1, Subsystem.COMBAT), PanelSlot.PRIMARY)

    def test_other_entities_do_not_affect_placement(self):
        self.board.show(1, Subsystem.RAID, 120)
        self.board.show(2, Subsystem.COMBAT, 5)
        self.assertEqual(self.board.slot_for(2, Subsystem.COMBAT), PanelSlot.PRIMARY)

    def test_zero_remaining_hides(self):
        self.board.show(1, Subsystem.RAID, 10)
        self.board.show(1, Subsystem.RAID, 0)
        self.assertFalse(self.board.has_panel(1, Subsystem.RAID))
        self.assertEqual(self.board.entity_ids(), [])

    def test_progress_fraction(self):
        self.board.show(1, Subsystem.RAID, 150)
        self.assertAlmostEqual(self.board.views(1)[0].progress, 0.5)

    def test_progress_clamped_and_unknown_max(self):
        board = HudBoard({Subsystem.RAID: 10})
        board.show(1, Subsystem.RAID, 40)
        board.show(1, Subsystem.COMBAT, 3)
        progress = {v.subsystem: v.progress for v in board.views(1)}
        self.assertEqual(progress[Subsystem.RAID], 1.0)
        self.assertEqual(progress[Subsystem.COMBAT], 1.0)

    def test_clear(self):
        self.board.show(1, Subsystem.RAID, 10)
        self.board.clear()
        self.assertEqual(self.board.views(1), [])


class TestPanelNotifier(unittest.TestCase):

    def test_service_drives_both_panels(self):
        config = RaidBlockConfig(block_duration=10, combat_block_duration=3)
        board = HudBoard({Subsystem.RAID: 10, Subsystem.COMBAT: 3})
        world = WorldState()
        world.add_entity(1, Vector3(0, 0, 0))
        world.add_entity(2, Vector3(1, 0, 0))
        service = RaidBlockService(
            config,
            world=world,
            raid_notifier=board.notifier(Subsystem.RAID),
            combat_notifier=board.notifier(Subsystem.COMBAT),
        )

        service.on_qualifying_damage(1, None, Vector3(0, 0, 0))
        service.on_player_damage(2, 1)
        self.assertEqual(board.displayed(1, Subsystem.RAID), 10)
        self.assertEqual(board.slot_for(1, Subsystem.COMBAT), PanelSlot.RAISED)
        self.assertEqual(board.slot_for(2, Subsystem.COMBAT), PanelSlot.PRIMARY)

        for _ in range(3):
            service.tick()
        self.assertFalse(board.has_panel(1, Subsystem.COMBAT))
        self.assertEqual(board.displayed(1, Subsystem.RAID), 7)


if __name__ == "__main__":
    unittest.main()
