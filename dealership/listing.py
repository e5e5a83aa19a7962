# dealership/listing.py
"""In-memory search, filter and sort for the public vehicle listing.

Everything here is pure: functions take the fetched collection of cars
(ORM rows or schema objects, anything exposing the car attributes) and the
shopper's current criteria, and return new sequences without touching the
input.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Sequence

ALL = "all"


class SortKey(str, Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    YEAR_DESC = "year-desc"
    YEAR_ASC = "year-asc"
    MILEAGE_ASC = "mileage-asc"


# sort key -> (attribute, descending)
_SORT_FIELDS = {
    SortKey.PRICE_ASC: ("price", False),
    SortKey.PRICE_DESC: ("price", True),
    SortKey.YEAR_DESC: ("year", True),
    SortKey.YEAR_ASC: ("year", False),
    SortKey.MILEAGE_ASC: ("mileage", False),
}


@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""
    make: str = ALL
    condition: str = ALL
    sort: SortKey = SortKey.PRICE_ASC

    @classmethod
    def cleared(cls) -> "FilterCriteria":
        """Criteria after "Clear Filters": no search, every make and condition, cheapest first."""
        return cls()


@dataclass
class ListingView:
    cars: List[Any] = field(default_factory=list)
    makes: List[str] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)
    total: int = 0

    @property
    def summary(self) -> str:
        return f"Showing {len(self.cars)} of {self.total} vehicles"


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


def matches_search(car: Any, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return (
        _contains(car.title, needle)
        or _contains(car.make, needle)
        or _contains(car.model, needle)
    )


def _matches_selector(value: Optional[str], selected: str) -> bool:
    if not selected or selected == ALL:
        return True
    return value == selected


def matches(car: Any, criteria: FilterCriteria) -> bool:
    return (
        matches_search(car, criteria.search)
        and _matches_selector(car.make, criteria.make)
        and _matches_selector(car.condition, criteria.condition)
    )


def _number(value) -> Decimal:
    # missing price/year/mileage sorts as zero
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def sort_cars(cars: Sequence[Any], sort: SortKey) -> List[Any]:
    try:
        attr, descending = _SORT_FIELDS[sort]
    except (KeyError, TypeError):
        # unknown key: keep the filtered order
        return list(cars)
    # sorted() is stable, reverse=True included, so ties keep their input order
    return sorted(cars, key=lambda car: _number(getattr(car, attr)), reverse=descending)


def filter_and_sort(cars: Sequence[Any], criteria: FilterCriteria) -> List[Any]:
    return sort_cars([car for car in cars if matches(car, criteria)], criteria.sort)


def _distinct(values) -> List[str]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def facets(cars: Sequence[Any]):
    """Distinct non-empty makes and conditions, in first-seen order."""
    return _distinct(c.make for c in cars), _distinct(c.condition for c in cars)


def derive_view(cars: Sequence[Any], criteria: Optional[FilterCriteria] = None) -> ListingView:
    criteria = criteria or FilterCriteria.cleared()
    makes, conditions = facets(cars)
    return ListingView(
        cars=filter_and_sort(cars, criteria),
        makes=makes,
        conditions=conditions,
        total=len(cars),
    )


def display_title(car: Any) -> str:
    if car.title:
        return car.title
    return " ".join(part for part in (car.make, car.model) if part)


def format_price(price, currency: str = "KES") -> str:
    # a zero price is shown the same as a missing one
    if not price:
        return "Price on request"
    return f"{currency} {Decimal(str(price)):,.0f}"


def format_mileage(mileage: Optional[int]) -> Optional[str]:
    if mileage is None:
        return None
    return f"{mileage:,} km"
