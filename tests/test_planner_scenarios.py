import unittest

from catalogs.plan_state import PlanState
from catalogs.trucks import TRUCK_CATALOG
from domain.errors import ConfigurationError, PlanningError
from domain.types import CargoItem, LegalLimits, PlanStage, TrailerCategory
from geometry.aabb import rect_at, rect_intersects
from solver.planner import plan_loads


def _item(item_id, length, width, height, weight, quantity=1):
  return CargoItem(
    id=item_id, description=item_id, quantity=quantity,
    length=length, width=width, height=height, weight=weight,
  )


def _input_weight(items):
  return sum(it.total_weight() for it in items)


def _assert_no_overlap(test, plan):
  for load in plan.loads:
    by_id = {it.id: it for it in load.items}
    rects = []
    for p in load.placements:
      it = by_id[p.itemId]
      dx, dz = (it.width, it.length) if p.rotated else (it.length, it.width)
      rects.append(rect_at(p.x, p.z, dx, dz))
    for i in range(len(rects)):
      for j in range(i):
        test.assertFalse(rect_intersects(rects[i], rects[j]), f"{load.id}: {rects[i]} overlaps {rects[j]}")


def _assert_capacity_or_flagged(test, plan):
  for load in plan.loads:
    if load.weight > load.recommendedTruck.maxCargoWeight:
      test.assertTrue(any(w.startswith("Overweight") for w in load.warnings), load.id)


class PlannerScenarioTests(unittest.TestCase):
  def test_single_legal_flatbed_load(self):
    plan = plan_loads([_item("machine", 40.0, 8.0, 10.0, 30000.0)])

    self.assertEqual(plan.totalTrucks, 1)
    load = plan.loads[0]
    self.assertEqual(load.id, "load-1")
    self.assertEqual(load.recommendedTruck.category, TrailerCategory.FLATBED)
    self.assertTrue(load.isLegal)
    self.assertEqual(load.permitsRequired, [])
    self.assertEqual(plan.unassignedItems, [])
    self.assertEqual(plan.warnings, [])

  def test_oversize_overweight_piece(self):
    plan = plan_loads([_item("vessel", 60.0, 9.0, 14.0, 50000.0)])

    self.assertEqual(plan.totalTrucks, 1)
    load = plan.loads[0]
    self.assertGreaterEqual(load.recommendedTruck.deckLength, 60.0)
    self.assertFalse(load.isLegal)
    self.assertIn("OVERSIZE_LENGTH", load.permitsRequired)
    self.assertIn("OVERWEIGHT", load.permitsRequired)
    self.assertTrue(any(w.startswith("load-1: Overweight") for w in plan.warnings))

  def test_heavy_pair_needs_two_trucks(self):
    items = [_item("press", 45.0, 8.0, 12.0, 45000.0, quantity=2)]
    plan = plan_loads(items)

    self.assertEqual(plan.totalTrucks, 2)
    self.assertEqual(plan.unassignedItems, [])
    self.assertEqual(plan.totalWeight, 90000.0)
    self.assertEqual(plan.totalItems, 2)
    for load in plan.loads:
      self.assertLessEqual(load.weight, load.recommendedTruck.maxCargoWeight)
    self.assertEqual([ld.id for ld in plan.loads], ["load-1", "load-2"])
    self.assertTrue(any(w.startswith("Load requires 2 trucks") for w in plan.warnings))

  def test_legal_pieces_split_into_legal_flatbeds(self):
    items = [_item("crate", 10.0, 4.0, 4.0, 4000.0, quantity=30)]
    plan = plan_loads(items)

    self.assertEqual(plan.totalTrucks, 3)
    self.assertEqual(plan.unassignedItems, [])
    self.assertEqual(plan.totalItems, 30)
    for load in plan.loads:
      self.assertTrue(load.isLegal, f"{load.id}: {load.permitsRequired}")
      self.assertEqual(load.permitsRequired, [])
      self.assertEqual(load.recommendedTruck.category, TrailerCategory.FLATBED)
      self.assertEqual(len(load.placements), 10)
      self.assertEqual(load.weight, 40000.0)
    self.assertFalse(any("Overweight" in w for w in plan.warnings))
    _assert_no_overlap(self, plan)

  def test_heavy_short_pair_goes_on_two_legal_loads(self):
    items = [_item("press", 20.0, 8.0, 8.0, 45000.0, quantity=2)]
    plan = plan_loads(items)

    self.assertEqual(plan.totalTrucks, 2)
    self.assertEqual(plan.unassignedItems, [])
    for load in plan.loads:
      self.assertTrue(load.isLegal, f"{load.id}: {load.permitsRequired}")
      self.assertEqual(load.weight, 45000.0)
      self.assertNotEqual(load.recommendedTruck.category, TrailerCategory.SCHNABEL)

  def test_invalid_item_excluded(self):
    bad = _item("bad", 0.0, 8.0, 5.0, 1000.0)
    good = _item("good", 20.0, 8.0, 5.0, 10000.0)
    plan = plan_loads([bad, good])

    self.assertEqual(plan.unassignedItems, [bad])
    self.assertTrue(any("bad" in w and "excluded" in w for w in plan.warnings))
    self.assertEqual(plan.totalTrucks, 1)
    self.assertEqual(plan.loads[0].items, [good])
    self.assertEqual(plan.totalWeight, 10000.0)

  def test_ten_small_boxes_on_one_truck(self):
    items = [_item("box", 5.0, 5.0, 5.0, 2000.0, quantity=10)]
    plan = plan_loads(items)

    self.assertEqual(plan.totalTrucks, 1)
    load = plan.loads[0]
    self.assertEqual(len(load.placements), 10)
    self.assertEqual(sorted(p.unit for p in load.placements), list(range(10)))
    _assert_no_overlap(self, plan)
    self.assertLess(load.utilization.weightPercent, 100.0)
    self.assertLess(load.utilization.spacePercent, 100.0)
    self.assertGreater(load.utilization.weightPercent, 0.0)
    self.assertEqual(plan.totalItems, 10)

  def test_missing_quantity_and_duplicate_ids(self):
    no_qty = CargoItem(id="q", description="", quantity=None, length=5.0, width=5.0, height=5.0, weight=100.0)
    first = _item("dup", 5.0, 5.0, 5.0, 100.0)
    second = _item("dup", 6.0, 6.0, 6.0, 200.0)
    plan = plan_loads([no_qty, first, second])

    self.assertEqual(plan.unassignedItems, [no_qty, second])
    self.assertEqual(plan.loads[0].items, [first])
    self.assertTrue(any("missing quantity" in w for w in plan.warnings))
    self.assertTrue(any("duplicate" in w for w in plan.warnings))

  def test_unsatisfiable_piece_reported(self):
    bridge = _item("bridge", 200.0, 8.0, 6.0, 20000.0)
    crate = _item("crate", 8.0, 4.0, 4.0, 1500.0, quantity=3)
    plan = plan_loads([bridge, crate])

    self.assertEqual([it.id for it in plan.unassignedItems], ["bridge"])
    self.assertTrue(any("bridge" in w and "length" in w for w in plan.warnings))
    self.assertEqual(plan.totalTrucks, 1)
    self.assertEqual(plan.totalItems, 3)

  def test_conservation(self):
    items = [
      _item("a", 30.0, 8.0, 8.0, 20000.0, quantity=2),
      _item("b", 12.0, 6.0, 6.0, 5000.0, quantity=3),
      _item("c", 200.0, 8.0, 6.0, 20000.0),
      _item("d", 60.0, 9.0, 14.0, 50000.0),
    ]
    plan = plan_loads(items)

    unassigned = sum(it.total_weight() for it in plan.unassignedItems)
    self.assertAlmostEqual(plan.totalWeight + unassigned, _input_weight(items))
    self.assertEqual(plan.totalTrucks, len(plan.loads))
    self.assertEqual(plan.totalItems, sum(ld.item_count() for ld in plan.loads))
    _assert_no_overlap(self, plan)
    _assert_capacity_or_flagged(self, plan)

  def test_idempotent(self):
    items = [
      _item("a", 30.0, 8.0, 8.0, 20000.0, quantity=2),
      _item("b", 12.0, 6.0, 6.0, 5000.0, quantity=3),
      _item("c", 45.0, 8.0, 12.0, 45000.0, quantity=2),
    ]
    self.assertEqual(plan_loads(items), plan_loads(items))
    self.assertEqual(plan_loads(items).to_dict(), plan_loads(list(items)).to_dict())

  def test_empty_input(self):
    plan = plan_loads([])
    self.assertEqual(plan.totalTrucks, 0)
    self.assertEqual(plan.loads, [])
    self.assertEqual(plan.totalWeight, 0)

  def test_limits_mapping_and_errors(self):
    items = [_item("long", 50.0, 8.0, 5.0, 10000.0)]
    plan = plan_loads(items, {"maxLegalLength": 45.0})
    self.assertIn("OVERSIZE_LENGTH", plan.loads[0].permitsRequired)

    with self.assertRaises(ConfigurationError):
      plan_loads(items, {"maxLegalWidth": 0})
    with self.assertRaises(ConfigurationError):
      plan_loads(items, {"maxLegalWidht": 9.0})
    with self.assertRaises(ConfigurationError):
      plan_loads(items, "strict")

  def test_empty_catalog_is_configuration_error(self):
    with self.assertRaises(ConfigurationError):
      plan_loads([_item("a", 5.0, 5.0, 5.0, 100.0)], catalog=[])

  def test_debug_events_forwarded(self):
    events = []
    plan_loads([_item("a", 5.0, 5.0, 5.0, 100.0)], debug_log=lambda evt, payload: events.append(evt))
    self.assertEqual(events[0], "plan_started")
    self.assertEqual(events[-1], "plan_ready")
    self.assertIn("load_packed", events)

  def test_failing_debug_sink_does_not_break_planning(self):
    def sink(evt, payload):
      raise RuntimeError("disk full")

    with self.assertLogs("debug.events", level="WARNING"):
      plan = plan_loads([_item("a", 5.0, 5.0, 5.0, 100.0)], debug_log=sink)
    self.assertEqual(plan.totalTrucks, 1)


class PlanStateTests(unittest.TestCase):
  def test_stages_advance_in_order_only(self):
    state = PlanState(limits=LegalLimits(), catalog=TRUCK_CATALOG)
    with self.assertRaises(PlanningError):
      state.advance(PlanStage.PACKED)

    for stage in (PlanStage.GROUPED, PlanStage.PACKED, PlanStage.EVALUATED, PlanStage.FINALIZED):
      state.advance(stage)
    self.assertIs(state.stage, PlanStage.FINALIZED)

    with self.assertRaises(PlanningError):
      state.advance(PlanStage.FINALIZED)

  def test_snapshot_requires_finalized(self):
    state = PlanState(limits=LegalLimits(), catalog=TRUCK_CATALOG)
    with self.assertRaises(PlanningError):
      state.snapshot([])


if __name__ == "__main__":
  unittest.main()
