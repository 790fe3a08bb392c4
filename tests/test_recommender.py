import unittest

from catalogs.trucks import TRUCK_CATALOG, get_truck
from domain.types import CargoItem, TrailerCategory, TruckType
from solver.recommender import recommend


def _item(item_id, length, width, height, weight, quantity=1):
  return CargoItem(
    id=item_id, description=item_id, quantity=quantity,
    length=length, width=width, height=height, weight=weight,
  )


class RecommenderTests(unittest.TestCase):
  def test_legal_flatbed_load(self):
    rec = recommend([_item("a", 40.0, 8.0, 10.0, 30000.0)])

    self.assertIsNotNone(rec.recommendedTruck)
    self.assertEqual(rec.recommendedTruck.category, TrailerCategory.FLATBED)
    self.assertEqual(rec.recommendedTruck.id, "flatbed-48-lowpro")
    self.assertFalse(rec.isOversizePermitRequired)
    self.assertFalse(rec.isOverweightPermitRequired)
    self.assertIsNone(rec.multiTruckSuggestion)
    self.assertFalse(rec.permitFit)

  def test_oversize_overweight_piece_goes_to_long_deck_with_permits(self):
    rec = recommend([_item("b", 60.0, 9.0, 14.0, 50000.0)])

    self.assertIsNotNone(rec.recommendedTruck)
    self.assertGreaterEqual(rec.recommendedTruck.deckLength, 60.0)
    self.assertEqual(rec.recommendedTruck.category, TrailerCategory.SCHNABEL)
    self.assertTrue(rec.permitFit)
    self.assertTrue(rec.isOversizePermitRequired)
    self.assertTrue(rec.isOverweightPermitRequired)

  def test_requirements_aggregate_long_side_first(self):
    rec = recommend([
      _item("a", 4.0, 10.0, 3.0, 1000.0, quantity=2),
      _item("b", 6.0, 5.0, 7.0, 500.0),
    ])
    req = rec.requirements
    self.assertEqual(req.lengthRequired, 10.0)
    self.assertEqual(req.widthRequired, 5.0)
    self.assertEqual(req.heightRequired, 7.0)
    self.assertEqual(req.weightRequired, 2500.0)

  def test_first_truck_in_preference_order_wins(self):
    rec = recommend([_item("small", 10.0, 8.0, 4.0, 5000.0)])
    self.assertEqual(rec.recommendedTruck.id, "flatbed-48")

  def test_seating_upgrades_to_longer_deck(self):
    rec = recommend([_item("box", 5.0, 5.0, 5.0, 2000.0, quantity=10)])
    self.assertEqual(rec.recommendedTruck.id, "flatbed-53")

  def test_set_over_the_weight_threshold_is_not_rated(self):
    rec = recommend([_item("press", 20.0, 8.0, 8.0, 45000.0, quantity=2)])

    # each piece rides a flatbed legally, the pair only under an overweight permit
    self.assertTrue(rec.permitFit)
    self.assertTrue(rec.isOverweightPermitRequired)
    self.assertFalse(rec.isOversizePermitRequired)
    self.assertIn("within legal limits", rec.reason)

    single = recommend([_item("press", 20.0, 8.0, 8.0, 45000.0)])
    self.assertFalse(single.permitFit)
    self.assertEqual(single.recommendedTruck.id, "flatbed-48")

  def test_long_laid_out_set_is_not_rated(self):
    # eleven 10' crates only seat on decks longer than the legal length
    rec = recommend([_item("crate", 10.0, 4.0, 4.0, 4000.0, quantity=11)])
    self.assertTrue(rec.permitFit)
    self.assertTrue(rec.isOversizePermitRequired)

    ten = recommend([_item("crate", 10.0, 4.0, 4.0, 4000.0, quantity=10)])
    self.assertFalse(ten.permitFit)
    self.assertEqual(ten.recommendedTruck.id, "flatbed-53")

  def test_weight_split_suggestion(self):
    rec = recommend([_item("heavy", 20.0, 8.0, 5.0, 300000.0)])

    self.assertIsNone(rec.recommendedTruck)
    self.assertIsNotNone(rec.multiTruckSuggestion)
    # largest capacity in the catalog is 250,000 lbs
    self.assertEqual(rec.multiTruckSuggestion.count, 2)
    self.assertIn("weight", rec.multiTruckSuggestion.reason.lower())
    self.assertTrue(rec.isOverweightPermitRequired)

  def test_dimensional_split_suggestion(self):
    rec = recommend([_item("bridge", 200.0, 8.0, 6.0, 20000.0)])
    self.assertIsNone(rec.recommendedTruck)
    self.assertEqual(rec.multiTruckSuggestion.count, 2)
    self.assertIn("length", rec.multiTruckSuggestion.reason.lower())
    self.assertTrue(rec.isOversizePermitRequired)

  def test_custom_catalog(self):
    only = TruckType(
      id="only", name="Only", category=TrailerCategory.DRY_VAN,
      deckLength=53.0, deckWidth=8.2, deckHeight=4.0,
      maxLegalCargoHeight=9.0, maxCargoWeight=45000.0,
    )
    rec = recommend([_item("a", 10.0, 8.0, 4.0, 5000.0)], catalog=[only])
    self.assertEqual(rec.recommendedTruck.id, "only")

  def test_default_catalog_is_not_mutated(self):
    before = tuple(TRUCK_CATALOG)
    recommend([_item("a", 10.0, 8.0, 4.0, 5000.0)])
    self.assertEqual(before, TRUCK_CATALOG)
    self.assertIsNotNone(get_truck("schnabel"))


if __name__ == "__main__":
  unittest.main()
