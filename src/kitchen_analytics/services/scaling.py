"""Non-linear recipe batch scaling."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from kitchen_analytics.domain.forecast import PaxDefaults
from kitchen_analytics.domain.scaling import (
    Ingredient,
    IngredientCategory,
    RecipeRecord,
    ScaledIngredient,
    ScaledRecipe,
)
from kitchen_analytics.services.classifier import IngredientClassifier
from kitchen_analytics.services.numeric import round_half_away

_logger = logging.getLogger(__name__)


class InvalidServingsError(ValueError):
    """Raised when a serving count is not strictly positive."""


class RecipeNotFoundError(LookupError):
    """Raised when the recipe store has no recipe for an id."""


SPICE_SQRT_WEIGHT = 0.7


@dataclass(frozen=True)
class ScalingCurve:
    """Weighted blend of square-root and linear growth in the serving ratio."""

    sqrt_weight: float
    linear_weight: float
    note: str = ""

    def factor(self, ratio: float) -> float:
        """Return the quantity multiplier for a serving ratio."""
        return self.sqrt_weight * math.sqrt(ratio) + self.linear_weight * ratio


def _dampened_curve(sqrt_weight: float, note: str) -> ScalingCurve:
    # Weights in [0, 0.7) keep the factor between the spice curve and linear.
    if not 0 <= sqrt_weight < SPICE_SQRT_WEIGHT:
        raise ValueError(
            f"sqrt weight must be in [0, {SPICE_SQRT_WEIGHT}), got {sqrt_weight}"
        )
    return ScalingCurve(
        sqrt_weight=sqrt_weight, linear_weight=1.0 - sqrt_weight, note=note
    )


def default_curves(
    leavening_sqrt_weight: float = 0.5,
    cooking_fat_sqrt_weight: float = 0.6,
    liquid_sqrt_weight: float = 0.3,
) -> dict[IngredientCategory, ScalingCurve]:
    """Build the per-category curves.

    Only the Spice and Standard curves are confirmed by kitchen practice.
    The square-root weights of the remaining categories are provisional
    calibrations injected from configuration.
    """
    return {
        IngredientCategory.SPICE: ScalingCurve(
            sqrt_weight=SPICE_SQRT_WEIGHT,
            linear_weight=1.0 - SPICE_SQRT_WEIGHT,
            note=(
                "Gewürze skalieren gedämpft, da Intensität pro Portion "
                "bei großen Mengen höher ist"
            ),
        ),
        IngredientCategory.LEAVENING: _dampened_curve(
            leavening_sqrt_weight,
            "Triebmittel skalieren leicht reduziert (chemische Reaktion)",
        ),
        IngredientCategory.COOKING_FAT: _dampened_curve(
            cooking_fat_sqrt_weight,
            "Bratfett basiert auf Oberfläche, nicht Volumen",
        ),
        IngredientCategory.LIQUID: _dampened_curve(
            liquid_sqrt_weight,
            "Weniger Verdampfung bei größeren Mengen",
        ),
        IngredientCategory.STANDARD: ScalingCurve(
            sqrt_weight=0.0,
            linear_weight=1.0,
            note="Linear skaliert",
        ),
    }


@dataclass(frozen=True)
class ScalingEngine:
    """Scales ingredient quantities between serving counts."""

    classifier: IngredientClassifier = field(default_factory=IngredientClassifier)
    curves: dict[IngredientCategory, ScalingCurve] = field(
        default_factory=default_curves
    )

    def scale(
        self,
        ingredient: Ingredient,
        reference_servings: float,
        target_servings: float,
    ) -> ScaledIngredient:
        """Scale one ingredient from the reference to the target serving count.

        The unit is passed through unchanged; negative quantities scale as 0.
        """
        _validate_servings(reference_servings, target_servings)
        ratio = target_servings / reference_servings
        category = self.classifier.classify(ingredient.name)
        curve = self.curves.get(category) or self.curves[IngredientCategory.STANDARD]
        factor = curve.factor(ratio)
        scaled = max(ingredient.quantity, 0.0) * factor
        return ScaledIngredient(
            name=ingredient.name,
            original_quantity=ingredient.quantity,
            scaled_quantity=round_half_away(scaled),
            unit=ingredient.unit,
            scaling_factor=round_half_away(factor),
            category=category,
            note=curve.note,
        )

    def scale_all(
        self,
        ingredients: Iterable[Ingredient],
        reference_servings: float,
        target_servings: float,
    ) -> list[ScaledIngredient]:
        """Scale every ingredient of a recipe."""
        _validate_servings(reference_servings, target_servings)
        return [
            self.scale(ingredient, reference_servings, target_servings)
            for ingredient in ingredients
        ]


class RecipeRepository(Protocol):
    """Read access to the recipe store."""

    def get_recipe(self, recipe_id: int) -> RecipeRecord | None:
        """Return a recipe header by id."""

    def list_ingredients(self, recipe_id: int) -> list[Ingredient]:
        """Return the ingredient lines of a recipe."""


@dataclass
class RecipeScalingService:
    """Scales stored recipes for production."""

    repository: RecipeRepository
    engine: ScalingEngine
    pax_defaults: PaxDefaults = field(default_factory=PaxDefaults)

    def scale_recipe(self, recipe_id: int, target_servings: int) -> ScaledRecipe:
        """Load a recipe and scale all of its ingredients to ``target_servings``."""
        if target_servings <= 0:
            _logger.info(
                "Rejected scaling of recipe %s to %s servings",
                recipe_id,
                target_servings,
            )
            raise InvalidServingsError("targetServings must be greater than 0")
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(f"Recipe {recipe_id} not found")
        original_servings = recipe.portions or 1
        ingredients = self.repository.list_ingredients(recipe_id)
        return ScaledRecipe(
            recipe=recipe,
            original_servings=original_servings,
            target_servings=target_servings,
            scaled_ingredients=self.engine.scale_all(
                ingredients, original_servings, target_servings
            ),
        )

    def scale_for_service(
        self,
        recipe_id: int,
        location_slug: str | None,
        guest_count: int | None = None,
    ) -> ScaledRecipe:
        """Scale a recipe to the guest count of a meal service.

        Falls back to the location's default guest count when none was recorded.
        """
        pax = self.pax_defaults.resolve(location_slug, guest_count)
        if not guest_count:
            _logger.info(
                "No guest count for %s, using default of %s", location_slug, pax
            )
        return self.scale_recipe(recipe_id, pax)


def _validate_servings(reference_servings: float, target_servings: float) -> None:
    if target_servings <= 0:
        raise InvalidServingsError("targetServings must be greater than 0")
    if reference_servings <= 0:
        raise InvalidServingsError("referenceServings must be greater than 0")
