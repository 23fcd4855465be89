"""Domain models for recipe batch scaling."""

from dataclasses import dataclass
from enum import StrEnum


class Unit(StrEnum):
    """Units the recipe store knows about.

    Ingredients may carry any unit string; unknown units pass through
    scaling untouched.
    """

    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    PIECE = "piece"


class IngredientCategory(StrEnum):
    """Scaling behaviour class of an ingredient."""

    SPICE = "Spice"
    LEAVENING = "Leavening"
    COOKING_FAT = "CookingFat"
    LIQUID = "Liquid"
    STANDARD = "Standard"


@dataclass(frozen=True)
class Ingredient:
    """A recipe line item."""

    name: str
    quantity: float
    unit: str


@dataclass(frozen=True)
class ScaledIngredient:
    """Result of scaling one ingredient."""

    name: str
    original_quantity: float
    scaled_quantity: float
    unit: str
    scaling_factor: float
    category: IngredientCategory
    note: str


@dataclass(frozen=True)
class RecipeRecord:
    """Recipe header as stored by the recipe store."""

    id: int
    name: str
    category: str | None
    portions: int | None


@dataclass(frozen=True)
class ScaledRecipe:
    """A recipe scaled to a target serving count."""

    recipe: RecipeRecord
    original_servings: int
    target_servings: int
    scaled_ingredients: list[ScaledIngredient]
