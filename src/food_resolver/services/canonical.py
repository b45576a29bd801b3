"""Food-class inference and canonical nutrition keys."""

from dataclasses import dataclass, field
from typing import Protocol

from food_resolver.domain.facets import Facets
from food_resolver.domain.nutrition import PerGramProfile
from food_resolver.services.facets import parse_query

# Core noun tag -> food class id, in priority order when a name has several.
_CLASS_BY_CORE: dict[str, str] = {
    "hot_dog": "hot_dog_link",
    "pizza": "pizza_slice",
    "teriyaki_bowl": "teriyaki_bowl",
    "california_roll": "california_roll",
    "sushi": "california_roll",
    "burger": "burger",
    "burrito": "burrito",
    "taco": "taco",
    "sandwich": "sandwich",
    "soup": "soup_bowl",
    "salad": "salad_side",
    "mac_and_cheese": "mac_and_cheese",
    "fries": "fries_medium",
    "oatmeal": "oatmeal_cooked",
    "pasta": "pasta_cooked",
    "rice": "rice_cooked",
    "egg": "egg_large",
    "chicken": "chicken_breast",
    "steak": "steak",
    "salmon": "salmon_fillet",
    "bread": "bread_slice",
    "bagel": "bagel",
    "pancake": "pancake",
    "waffle": "waffle",
    "donut": "donut",
    "muffin": "muffin",
    "cookie": "cookie",
    "banana": "banana_medium",
    "apple": "apple_medium",
    "avocado": "avocado",
    "yogurt": "yogurt_cup",
    "ice_cream": "ice_cream_scoop",
    "bowl": "teriyaki_bowl",
    "roll": "california_roll",
}
_CORE_PRIORITY = {core: rank for rank, core in enumerate(_CLASS_BY_CORE)}

CANONICAL_BY_CLASS: dict[str, str] = {
    "hot_dog_link": "generic_hot_dog",
    "pizza_slice": "generic_pizza_slice",
    "teriyaki_bowl": "generic_teriyaki_chicken_bowl",
    "california_roll": "generic_california_roll",
    "burger": "generic_hamburger",
    "burrito": "generic_burrito",
    "taco": "generic_taco",
    "sandwich": "generic_sandwich",
    "soup_bowl": "generic_soup",
    "salad_side": "generic_garden_salad",
    "mac_and_cheese": "generic_mac_and_cheese",
    "fries_medium": "generic_french_fries",
    "oatmeal_cooked": "generic_oatmeal_cooked",
    "pasta_cooked": "generic_pasta_cooked",
    "rice_cooked": "generic_white_rice_cooked",
    "egg_large": "generic_egg_large",
    "chicken_breast": "generic_chicken_breast_cooked",
    "steak": "generic_steak_cooked",
    "salmon_fillet": "generic_salmon_cooked",
    "bread_slice": "generic_bread_slice",
    "bagel": "generic_bagel",
    "pancake": "generic_pancake",
    "waffle": "generic_waffle",
    "donut": "generic_donut",
    "muffin": "generic_muffin",
    "cookie": "generic_cookie",
    "banana_medium": "generic_banana",
    "apple_medium": "generic_apple",
    "avocado": "generic_avocado",
    "yogurt_cup": "generic_yogurt_plain",
    "ice_cream_scoop": "generic_ice_cream",
}

# Per 100 g: kcal, protein, carbs, fat, fiber, sugar, sodium (mg).
_CANONICAL_PER_100G: dict[str, tuple[float, ...]] = {
    "generic_hot_dog": (290, 10.3, 2.2, 26.1, 0.0, 1.2, 1020),
    "generic_pizza_slice": (266, 11.4, 33.3, 9.7, 2.3, 3.6, 598),
    "generic_teriyaki_chicken_bowl": (163, 12.0, 21.0, 4.0, 1.0, 5.0, 450),
    "generic_california_roll": (129, 4.0, 18.0, 4.5, 1.2, 3.0, 428),
    "generic_hamburger": (254, 13.0, 24.0, 11.5, 1.3, 4.5, 473),
    "generic_burrito": (206, 8.0, 25.0, 8.0, 2.5, 1.5, 500),
    "generic_taco": (226, 9.0, 20.0, 12.0, 3.0, 1.5, 400),
    "generic_sandwich": (240, 12.0, 27.0, 9.0, 2.0, 4.0, 600),
    "generic_soup": (40, 2.5, 5.0, 1.2, 0.7, 1.0, 350),
    "generic_garden_salad": (20, 1.2, 3.6, 0.2, 1.8, 2.0, 20),
    "generic_mac_and_cheese": (164, 6.4, 19.0, 6.8, 1.0, 2.0, 370),
    "generic_french_fries": (312, 3.4, 41.0, 15.0, 3.8, 0.3, 210),
    "generic_oatmeal_cooked": (68, 2.4, 12.0, 1.4, 1.7, 0.5, 49),
    "generic_pasta_cooked": (158, 5.8, 31.0, 0.9, 1.8, 0.6, 1),
    "generic_white_rice_cooked": (130, 2.7, 28.2, 0.3, 0.4, 0.1, 1),
    "generic_egg_large": (155, 13.0, 1.1, 11.0, 0.0, 1.1, 124),
    "generic_chicken_breast_cooked": (165, 31.0, 0.0, 3.6, 0.0, 0.0, 74),
    "generic_steak_cooked": (271, 25.0, 0.0, 19.0, 0.0, 0.0, 60),
    "generic_salmon_cooked": (206, 22.0, 0.0, 12.0, 0.0, 0.0, 61),
    "generic_bread_slice": (265, 9.0, 49.0, 3.2, 2.7, 5.0, 491),
    "generic_bagel": (257, 10.0, 50.0, 1.6, 2.2, 6.0, 439),
    "generic_pancake": (227, 6.4, 28.0, 9.7, 1.0, 5.0, 439),
    "generic_waffle": (291, 7.9, 33.0, 14.0, 1.7, 6.0, 511),
    "generic_donut": (452, 4.9, 51.0, 25.0, 1.7, 23.0, 326),
    "generic_muffin": (377, 5.6, 53.0, 16.0, 1.5, 28.0, 350),
    "generic_cookie": (488, 5.5, 64.0, 24.0, 2.0, 35.0, 350),
    "generic_banana": (89, 1.1, 22.8, 0.3, 2.6, 12.2, 1),
    "generic_apple": (52, 0.3, 13.8, 0.2, 2.4, 10.4, 1),
    "generic_avocado": (160, 2.0, 8.5, 14.7, 6.7, 0.7, 7),
    "generic_yogurt_plain": (61, 3.5, 4.7, 3.3, 0.0, 4.7, 46),
    "generic_ice_cream": (207, 3.5, 24.0, 11.0, 0.7, 21.0, 80),
}


def canonical_for(class_id: str | None) -> str | None:
    """Return the canonical nutrition key for a food class, if known."""
    if not class_id:
        return None
    return CANONICAL_BY_CLASS.get(class_id)


def infer_class_id(name: str | None, facets: Facets | None = None) -> str | None:
    """Infer a food class from a display name, then from query facets."""
    for source in (parse_query(name).core, facets.core if facets else ()):
        known = [core for core in source if core in _CLASS_BY_CORE]
        if known:
            best = min(known, key=_CORE_PRIORITY.__getitem__)
            return _CLASS_BY_CORE[best]
    return None


def derive_canonical_key(title: str | None) -> str | None:
    """Derive a canonical key from the core nouns of a display title."""
    return canonical_for(infer_class_id(title))


class CanonicalNutritionTable(Protocol):
    """Lookup of fixed nutrition profiles by canonical key."""

    async def lookup(self, key: str) -> PerGramProfile | None:
        """Return the per-gram profile for a canonical key, if present."""


@dataclass
class InMemoryCanonicalTable(CanonicalNutritionTable):
    """Canonical table served from the built-in generic profiles."""

    profiles: dict[str, tuple[float, ...]] = field(
        default_factory=lambda: dict(_CANONICAL_PER_100G)
    )

    async def lookup(self, key: str) -> PerGramProfile | None:
        """Return the built-in profile for a canonical key."""
        values = self.profiles.get(key)
        if values is None:
            return None
        calories, protein, carbs, fat, fiber, sugar, sodium = values
        return PerGramProfile.from_per_100g(
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            fiber=fiber,
            sugar=sugar,
            sodium=sodium,
        )
