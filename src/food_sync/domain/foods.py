"""Food domain models."""

from dataclasses import dataclass, field

DOCUMENT_TYPE = "food"


@dataclass(frozen=True)
class FoodRecord:
    """Base food row from the FDC food table."""

    fdc_id: int
    description: str
    source: str


@dataclass(frozen=True)
class BrandInfo:
    """Branded food attributes; null columns are normalized by the store."""

    brand_owner: str | None = None
    brand_name: str | None = None
    subbrand_name: str | None = None
    serving_size: float | None = None
    serving_size_unit: str | None = None
    household_serving_fulltext: str | None = None


@dataclass(frozen=True)
class NutrientEntry:
    """Amount of a single nutrient in a food."""

    name: str
    amount: float | None
    unit_name: str

    def to_payload(self) -> dict[str, object]:
        """Serialize the nutrient as an array item keyed by name."""
        return {
            "_key": self.name,
            "name": self.name,
            "amount": self.amount,
            "unit_name": self.unit_name,
        }


@dataclass(frozen=True)
class PortionEntry:
    """A household portion and its weight in grams."""

    amount: float | None
    unit: str
    gram_weight: float | None
    portion_description: str = ""
    modifier: str = ""

    def to_payload(self, key: str) -> dict[str, object]:
        """Serialize the portion as an array item with the given key."""
        return {
            "_key": key,
            "amount": self.amount,
            "unit": self.unit,
            "gram_weight": self.gram_weight,
            "portion_description": self.portion_description,
            "modifier": self.modifier,
        }


@dataclass(frozen=True)
class FetchedFood:
    """Result of the per-identifier store lookups; absence is a value."""

    food: FoodRecord | None = None
    brand: BrandInfo | None = None
    nutrients: list[NutrientEntry] = field(default_factory=list)
    portions: list[PortionEntry] = field(default_factory=list)


@dataclass(frozen=True)
class FoodDocument:
    """Submission-ready food document."""

    id: str
    fdc_id: int
    description: str
    source: str
    nutrients: tuple[NutrientEntry, ...]
    portions: tuple[tuple[str, PortionEntry], ...]
    brand: BrandInfo | None = None
    type: str = DOCUMENT_TYPE

    def to_payload(self) -> dict[str, object]:
        """Serialize to the remote store document shape.

        Brand fields are only present when the food has a branded_food row.
        """
        payload: dict[str, object] = {
            "_id": self.id,
            "_type": self.type,
            "description": self.description,
            "fdc_id": self.fdc_id,
            "source": self.source,
            "nutrients": [nutrient.to_payload() for nutrient in self.nutrients],
            "portions": [portion.to_payload(key) for key, portion in self.portions],
        }
        if self.brand is not None:
            payload.update(
                {
                    "brand_owner": self.brand.brand_owner,
                    "brand_name": self.brand.brand_name,
                    "subbrand_name": self.brand.subbrand_name,
                    "serving_size": self.brand.serving_size,
                    "serving_size_unit": self.brand.serving_size_unit,
                    "household_serving_fulltext": (
                        self.brand.household_serving_fulltext
                    ),
                }
            )
        return payload


@dataclass(frozen=True)
class MutationBatch:
    """All valid documents of one run, in processing order."""

    documents: tuple[FoodDocument, ...] = ()

    def __len__(self) -> int:
        return len(self.documents)

    def to_payload(self) -> dict[str, object]:
        """Wrap each document in a createOrReplace mutation."""
        return {
            "mutations": [
                {"createOrReplace": document.to_payload()}
                for document in self.documents
            ]
        }


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of submitting a batch."""

    submitted: int
    response: object | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
