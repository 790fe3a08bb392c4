import unittest

from sqlalchemy import create_engine, text

from catalogs.trucks import CATALOG_VERSION, TRUCK_CATALOG
from services.fetch import fetch_truck_type_rows
from services.planning import load_truck_catalog


DDL = """
create table truck_types (
    id text,
    name text,
    category text,
    description text,
    deck_length_ft real,
    deck_width_ft real,
    deck_height_ft real,
    well_length_ft real,
    max_cargo_weight_lbs real,
    max_legal_cargo_height_ft real,
    tare_weight_lbs real,
    loading_method text,
    features text,
    best_for text,
    is_active integer,
    sort_order integer
)
"""

INSERT = text("""
insert into truck_types (
    id, name, category, description, deck_length_ft, deck_width_ft, deck_height_ft, well_length_ft,
    max_cargo_weight_lbs, max_legal_cargo_height_ft, tare_weight_lbs, loading_method, features, best_for,
    is_active, sort_order
) values (
    :id, :name, :category, '', :deck_length_ft, :deck_width_ft, :deck_height_ft, null,
    :max_cargo_weight_lbs, null, null, 'forklift', :features, null,
    :is_active, :sort_order
)
""")


def _row(truck_id, category, sort_order, is_active=1, deck_length=48.0, capacity=48000.0):
  return {
    "id": truck_id, "name": truck_id.title(), "category": category,
    "deck_length_ft": deck_length, "deck_width_ft": 8.5, "deck_height_ft": 5.0,
    "max_cargo_weight_lbs": capacity, "features": '["Tarps"]',
    "is_active": is_active, "sort_order": sort_order,
  }


class FetchCatalogTests(unittest.TestCase):
  def setUp(self):
    self.engine = create_engine("sqlite://")
    with self.engine.begin() as conn:
      conn.execute(text(DDL))

  def tearDown(self):
    self.engine.dispose()

  def _insert(self, *rows):
    with self.engine.begin() as conn:
      for r in rows:
        conn.execute(INSERT, r)

  def test_active_rows_in_sort_order_without_duplicates(self):
    self._insert(
      _row("van", "DRY_VAN", 2),
      _row("flat", "FLATBED", 1),
      _row("flat", "FLATBED", 3),
      _row("old", "FLATBED", 0, is_active=0),
    )
    with self.assertLogs("services.fetch", level="WARNING"):
      rows = fetch_truck_type_rows(self.engine)
    self.assertEqual([r["id"] for r in rows], ["flat", "van"])

  def test_database_catalog_used_when_rows_valid(self):
    self._insert(_row("flat", "FLATBED", 1), _row("bad", "HOVERCRAFT", 2))
    with self.assertLogs("services.planning", level="WARNING"):
      catalog, source = load_truck_catalog(self.engine)
    self.assertEqual(source, "database")
    self.assertEqual([t.id for t in catalog], ["flat"])
    self.assertEqual(catalog[0].features, ("Tarps",))
    self.assertEqual(catalog[0].loadingMethod, "forklift")

  def test_static_catalog_when_table_empty(self):
    with self.assertLogs("services.planning", level="WARNING"):
      catalog, source = load_truck_catalog(self.engine)
    self.assertIs(catalog, TRUCK_CATALOG)
    self.assertEqual(source, f"static:{CATALOG_VERSION}")

  def test_static_catalog_when_table_missing(self):
    engine = create_engine("sqlite://")
    events = []
    with self.assertLogs("services.planning", level="WARNING"):
      catalog, _ = load_truck_catalog(engine, debug_log=lambda e, p: events.append(e))
    self.assertIs(catalog, TRUCK_CATALOG)
    self.assertEqual(events, ["catalog_fetch_failed"])
    engine.dispose()

  def test_no_engine(self):
    catalog, source = load_truck_catalog(None)
    self.assertIs(catalog, TRUCK_CATALOG)
    self.assertTrue(source.startswith("static:"))


if __name__ == "__main__":
  unittest.main()
