"""
Data models for the food desert checker.

All values are ephemeral: they are built for a single request and
serialised straight back to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in degrees."""

    latitude: float
    longitude: float

    def as_tuple(self):
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class FoodSource:
    """A food-related point of interest near the query point."""

    name: str
    distance: Optional[float]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    category: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "distance": self.distance,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "category": self.category,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FoodSource":
        return cls(
            name=data.get("name") or "",
            distance=data.get("distance"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            category=data.get("category") or "",
            address=data.get("address") or "",
        )


@dataclass(frozen=True)
class FoodDesertResult:
    """Classification plus the nearest food sources used to derive it."""

    is_food_desert: bool
    food_sources: List[FoodSource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isFoodDesert": self.is_food_desert,
            "foodSources": [source.to_dict() for source in self.food_sources],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FoodDesertResult":
        return cls(
            is_food_desert=bool(data["isFoodDesert"]),
            food_sources=[FoodSource.from_dict(item) for item in data.get("foodSources", [])],
        )
