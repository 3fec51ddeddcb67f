"""Shared test fixtures."""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from food_sync.adapters.mutation_client import MutationClient
from food_sync.config import Settings
from food_sync.domain.foods import (
    BrandInfo,
    FetchedFood,
    FoodRecord,
    NutrientEntry,
    PortionEntry,
)
from food_sync.services.sync import FoodRepository

_SCHEMA = """
create table food (
    fdc_id integer primary key,
    data_type text,
    description text
);
create table branded_food (
    fdc_id integer,
    brand_owner text,
    brand_name text,
    subbrand_name text,
    serving_size real,
    serving_size_unit text,
    household_serving_fulltext text
);
create table nutrient (id integer primary key, name text, unit_name text);
create table food_nutrient (id integer primary key, fdc_id integer, nutrient_id integer, amount real);
create table measure_unit (id integer primary key, name text);
create table food_portion (
    id integer primary key,
    fdc_id integer,
    amount real,
    measure_unit_id integer,
    portion_description text,
    modifier text,
    gram_weight real
);
"""


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    foods: dict[str, FetchedFood] = field(default_factory=dict)
    fetched: list[str] = field(default_factory=list)

    def fetch(self, fdc_id: str) -> FetchedFood:
        self.fetched.append(fdc_id)
        return self.foods.get(fdc_id, FetchedFood())


@dataclass
class RecordingMutationClient(MutationClient):
    """Fake mutation client that records payloads."""

    response: object = field(default_factory=lambda: {"transactionId": "tx-1"})
    payloads: list[dict[str, object]] = field(default_factory=list)

    async def mutate(self, payload: dict[str, object]) -> object:
        self.payloads.append(payload)
        return self.response


def banana() -> FetchedFood:
    return FetchedFood(
        food=FoodRecord(fdc_id=173944, description="Banana, raw", source="sr_legacy"),
        nutrients=[NutrientEntry(name="Potassium", amount=358, unit_name="mg")],
    )


def branded_yogurt() -> FetchedFood:
    return FetchedFood(
        food=FoodRecord(
            fdc_id=2001, description="Greek Yogurt", source="branded_food"
        ),
        brand=BrandInfo(
            brand_owner="Fage",
            brand_name="Total",
            subbrand_name="",
            serving_size=170,
            serving_size_unit="g",
            household_serving_fulltext="1 container",
        ),
        nutrients=[
            NutrientEntry(name="Zinc", amount=0.5, unit_name="mg"),
            NutrientEntry(name="Iron", amount=0.1, unit_name="mg"),
        ],
        portions=[PortionEntry(amount=1, unit="container", gram_weight=170)],
    )


@pytest.fixture(autouse=True)
def _reset_food_sync_logger():
    logger = logging.getLogger("food_sync")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def settings() -> Settings:
    return Settings(
        food_db_path="./food-data.sqlite3",
        omhh_api_uri="https://omhh.test/v1/",
        omhh_api_token="token",
    )


@pytest.fixture
def fdc_database(tmp_path: Path) -> Path:
    """Build a small FDC database: a legacy food, a branded food and a portion food."""
    db_path = tmp_path / "food-data.sqlite3"
    connection = sqlite3.connect(db_path)
    connection.executescript(_SCHEMA)
    connection.executemany(
        "insert into food values (?, ?, ?)",
        [
            (173944, "sr_legacy_food", "Banana, raw"),
            (2001, "branded_food", "Greek Yogurt"),
            (170567, "sr_legacy_food", "Almonds"),
        ],
    )
    connection.execute(
        "insert into branded_food values (?, ?, ?, ?, ?, ?, ?)",
        (2001, "Fage", "Total", None, 170, "g", None),
    )
    connection.executemany(
        "insert into nutrient values (?, ?, ?)",
        [(1, "Potassium", "mg"), (2, "Zinc", "mg"), (3, "Iron", "mg")],
    )
    connection.executemany(
        "insert into food_nutrient (fdc_id, nutrient_id, amount) values (?, ?, ?)",
        [(173944, 1, 358), (2001, 2, 0.5), (2001, 3, 0.1)],
    )
    connection.executemany(
        "insert into measure_unit values (?, ?)",
        [(1000, "cup"), (1001, "oz")],
    )
    connection.executemany(
        "insert into food_portion "
        "(fdc_id, amount, measure_unit_id, portion_description, modifier, gram_weight) "
        "values (?, ?, ?, ?, ?, ?)",
        [
            (170567, 1, 1000, None, "whole", 143),
            (170567, 1, 1001, "1 oz (23 whole kernels)", None, 28.35),
        ],
    )
    connection.commit()
    connection.close()
    return db_path
