"""SQLite implementation of the FDC food lookups."""

import logging
import math
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from food_sync.domain.foods import (
    BrandInfo,
    FetchedFood,
    FoodRecord,
    NutrientEntry,
    PortionEntry,
)
from food_sync.services.sync import FoodRepository

_FOOD_QUERY = """
    select f.fdc_id, f.description, f.data_type as source
    from food f
    where f.fdc_id = ?
"""

_BRAND_QUERY = """
    select brand_owner,
           ifnull(brand_name, '') as brand_name,
           ifnull(subbrand_name, '') as subbrand_name,
           ifnull(serving_size, 0) as serving_size,
           ifnull(serving_size_unit, '') as serving_size_unit,
           ifnull(household_serving_fulltext, '') as household_serving_fulltext
    from branded_food
    where fdc_id = ?
"""

_NUTRIENTS_QUERY = """
    select n.name, fn.amount, n.unit_name
    from food_nutrient fn
    inner join nutrient n on fn.nutrient_id = n.id
    where fn.fdc_id = ?
"""

_PORTIONS_QUERY = """
    select fp.amount,
           m.name as unit,
           fp.gram_weight,
           ifnull(fp.portion_description, '') as portion_description,
           ifnull(fp.modifier, '') as modifier
    from food_portion fp
    inner join measure_unit m on fp.measure_unit_id = m.id
    where fp.fdc_id = ?
"""

# Row conversion errors count as a failed lookup, same as query errors.
_LOOKUP_ERRORS = (sqlite3.Error, TypeError, ValueError)

_logger = logging.getLogger(__name__)


@dataclass
class SqliteFoodRepository(FoodRepository):
    """Read-only repository over a SQLite import of the FDC dataset."""

    connection: sqlite3.Connection

    @classmethod
    @contextmanager
    def open(cls, db_path: str | Path) -> Iterator["SqliteFoodRepository"]:
        """Open the database read-only and close it on exit.

        A missing or unreadable database raises ``sqlite3.Error``.
        """
        uri = f"{Path(db_path).resolve().as_uri()}?mode=ro"
        connection = sqlite3.connect(uri, uri=True)
        connection.row_factory = sqlite3.Row
        try:
            # Fails fast when the file is not a database.
            connection.execute("select 1 from sqlite_master limit 1")
            yield cls(connection=connection)
        finally:
            connection.close()

    def get_food(self, fdc_id: str) -> FoodRecord | None:
        """Return the base food record when exactly one row matches."""
        try:
            rows = self.connection.execute(_FOOD_QUERY, (fdc_id,)).fetchall()
            if len(rows) != 1:
                return None
            row = rows[0]
            return FoodRecord(
                fdc_id=int(row["fdc_id"]),
                description=str(row["description"]),
                source=str(row["source"]),
            )
        except _LOOKUP_ERRORS as exc:
            _logger.warning("Food lookup failed for %s: %s", fdc_id, exc)
            return None

    def get_brand(self, fdc_id: str) -> BrandInfo | None:
        """Return branded food attributes when exactly one row matches."""
        try:
            rows = self.connection.execute(_BRAND_QUERY, (fdc_id,)).fetchall()
            if len(rows) != 1:
                return None
            row = rows[0]
            return BrandInfo(
                brand_owner=row["brand_owner"],
                brand_name=row["brand_name"],
                subbrand_name=row["subbrand_name"],
                serving_size=float(row["serving_size"]),
                serving_size_unit=row["serving_size_unit"],
                household_serving_fulltext=row["household_serving_fulltext"],
            )
        except _LOOKUP_ERRORS as exc:
            _logger.warning("Brand lookup failed for %s: %s", fdc_id, exc)
            return None

    def list_nutrients(self, fdc_id: str) -> list[NutrientEntry]:
        """Return the nutrients of a food in store order."""
        try:
            rows = self.connection.execute(_NUTRIENTS_QUERY, (fdc_id,)).fetchall()
        except sqlite3.Error as exc:
            _logger.warning("Nutrient lookup failed for %s: %s", fdc_id, exc)
            return []
        nutrients: list[NutrientEntry] = []
        for row in rows:
            try:
                nutrients.append(
                    NutrientEntry(
                        name=str(row["name"]),
                        amount=_optional_float(row["amount"]),
                        unit_name=str(row["unit_name"]),
                    )
                )
            except _LOOKUP_ERRORS as exc:
                _logger.warning("Skipping nutrient row for %s: %s", fdc_id, exc)
        return nutrients

    def list_portions(self, fdc_id: str) -> list[PortionEntry]:
        """Return the portions of a food in store order.

        Null amounts and gram weights are passed through as ``None``.
        """
        try:
            rows = self.connection.execute(_PORTIONS_QUERY, (fdc_id,)).fetchall()
        except sqlite3.Error as exc:
            _logger.warning("Portion lookup failed for %s: %s", fdc_id, exc)
            return []
        portions: list[PortionEntry] = []
        for row in rows:
            try:
                portions.append(
                    PortionEntry(
                        amount=_optional_float(row["amount"]),
                        unit=str(row["unit"]),
                        gram_weight=_optional_float(row["gram_weight"]),
                        portion_description=str(row["portion_description"]),
                        modifier=str(row["modifier"]),
                    )
                )
            except _LOOKUP_ERRORS as exc:
                _logger.warning("Skipping portion row for %s: %s", fdc_id, exc)
        return portions

    def fetch(self, fdc_id: str) -> FetchedFood:
        """Run all lookups for one identifier."""
        return FetchedFood(
            food=self.get_food(fdc_id),
            brand=self.get_brand(fdc_id),
            nutrients=self.list_nutrients(fdc_id),
            portions=self.list_portions(fdc_id),
        )


def _optional_float(value: object) -> float | None:
    """Convert a numeric column, keeping SQL NULL as None."""
    if value is None or value == "":
        return None
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"non-finite value {value!r}")
    return amount
