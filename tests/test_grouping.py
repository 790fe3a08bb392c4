import unittest

from catalogs.item import expand_units
from catalogs.trucks import TRUCK_CATALOG
from domain.types import CargoItem, TrailerCategory, TruckType
from solver.grouper import UnitGroup, group_units
from solver.recommender import recommend_units
from solver.reopt import ReoptConfig, rebalance, weight_util


def _item(item_id, length, width, height, weight, quantity=1):
  return CargoItem(
    id=item_id, description=item_id, quantity=quantity,
    length=length, width=width, height=height, weight=weight,
  )


VAN = TruckType(
  id="van", name="Van", category=TrailerCategory.DRY_VAN,
  deckLength=53.0, deckWidth=8.5, deckHeight=4.0,
  maxLegalCargoHeight=9.0, maxCargoWeight=10000.0,
)


class GroupUnitsTests(unittest.TestCase):
  def test_whole_set_stays_together_when_it_fits(self):
    units = expand_units([_item("a", 4.0, 4.0, 4.0, 1000.0, quantity=5)])
    res = group_units(units, [VAN])
    self.assertEqual(len(res.groups), 1)
    self.assertEqual(len(res.groups[0].units), 5)
    self.assertEqual(res.rejected, [])

  def test_first_fit_decreasing_by_weight(self):
    units = expand_units([
      _item("light", 4.0, 4.0, 4.0, 2000.0, quantity=2),
      _item("heavy", 4.0, 4.0, 4.0, 6000.0, quantity=2),
    ])
    res = group_units(units, [VAN])

    # 16,000 lbs over 10,000 lbs trailers: heavy pieces open the loads, light ones fill the first
    self.assertEqual(len(res.groups), 2)
    self.assertEqual([u.item.id for u in res.groups[0].units], ["heavy", "light", "light"])
    self.assertEqual([u.item.id for u in res.groups[1].units], ["heavy"])
    for g in res.groups:
      self.assertLessEqual(g.weight(), VAN.maxCargoWeight)

  def test_piece_too_heavy_for_any_truck_is_rejected(self):
    units = expand_units([
      _item("anvil", 2.0, 2.0, 2.0, 12000.0),
      _item("box", 4.0, 4.0, 4.0, 1000.0),
    ])
    res = group_units(units, [VAN])

    self.assertEqual(len(res.groups), 1)
    self.assertEqual(len(res.rejected), 1)
    unit, reason = res.rejected[0]
    self.assertEqual(unit.item.id, "anvil")
    self.assertIn("weight", reason)

  def test_legal_group_does_not_grow_into_a_permit_load(self):
    units = expand_units([_item("crate", 10.0, 4.0, 4.0, 4000.0, quantity=30)])
    res = group_units(units, TRUCK_CATALOG)

    self.assertEqual(len(res.groups), 3)
    self.assertEqual(res.rejected, [])
    for g in res.groups:
      self.assertFalse(g.permit)
      self.assertFalse(g.recommendation.isOverweightPermitRequired)
      self.assertEqual(len(g.units), 10)
      self.assertEqual(g.truck.id, "flatbed-53")

  def test_whole_set_over_the_weight_threshold_is_split(self):
    units = expand_units([_item("press", 20.0, 8.0, 8.0, 45000.0, quantity=2)])
    events = []
    res = group_units(units, TRUCK_CATALOG, debug_log=lambda e, p: events.append(e))

    self.assertIn("grouping_split", events)
    self.assertEqual(len(res.groups), 2)
    for g in res.groups:
      self.assertFalse(g.permit)
      self.assertEqual(g.truck.id, "flatbed-48")

  def test_grouping_is_deterministic(self):
    items = [_item("a", 6.0, 4.0, 4.0, 3000.0, quantity=4), _item("b", 3.0, 3.0, 3.0, 1500.0, quantity=3)]
    first = group_units(expand_units(items), [VAN])
    second = group_units(expand_units(items), [VAN])
    self.assertEqual(
      [[(u.item.id, u.index) for u in g.units] for g in first.groups],
      [[(u.item.id, u.index) for u in g.units] for g in second.groups],
    )


class RebalanceTests(unittest.TestCase):
  def _group(self, units):
    return UnitGroup(units=units, recommendation=recommend_units(units, catalog=[VAN]))

  def test_moves_lightest_piece_from_heavy_to_light_load(self):
    units = expand_units([
      _item("a", 4.0, 4.0, 4.0, 4000.0),
      _item("b", 4.0, 4.0, 4.0, 3000.0),
      _item("c", 4.0, 4.0, 4.0, 2500.0),
      _item("d", 4.0, 4.0, 4.0, 2000.0),
    ])
    heavy = self._group(units[:3])
    light = self._group(units[3:])
    self.assertGreater(weight_util(heavy), 90.0)

    groups = rebalance([heavy, light], [VAN], cfg=ReoptConfig(enabled=True, max_iters=20))

    self.assertEqual(len(groups), 2)
    self.assertEqual([u.item.id for u in groups[0].units], ["a", "b"])
    self.assertEqual([u.item.id for u in groups[1].units], ["d", "c"])
    self.assertEqual(groups[0].weight() + groups[1].weight(), 11500.0)

  def test_disabled_leaves_groups_alone(self):
    units = expand_units([
      _item("a", 4.0, 4.0, 4.0, 4000.0),
      _item("b", 4.0, 4.0, 4.0, 3000.0),
      _item("c", 4.0, 4.0, 4.0, 2500.0),
      _item("d", 4.0, 4.0, 4.0, 2000.0),
    ])
    heavy = self._group(units[:3])
    light = self._group(units[3:])
    events = []
    rebalance([heavy, light], [VAN], debug_log=lambda e, p: events.append(e), cfg=ReoptConfig(enabled=False))
    self.assertEqual(len(heavy.units), 3)
    self.assertEqual(events, ["reopt_skipped"])


if __name__ == "__main__":
  unittest.main()
