"""Tests for the non-linear scaling engine."""

import math

import pytest

from kitchen_analytics.domain.scaling import Ingredient, IngredientCategory
from kitchen_analytics.services.scaling import (
    InvalidServingsError,
    ScalingCurve,
    ScalingEngine,
    default_curves,
)


def test_standard_ingredients_scale_linearly() -> None:
    scaled = ScalingEngine().scale(Ingredient("Mehl", 150, "g"), 4, 40)

    assert scaled.category == IngredientCategory.STANDARD
    assert scaled.scaled_quantity == 1500
    assert scaled.scaling_factor == 10
    assert scaled.note == "Linear skaliert"


def test_spices_scale_dampened() -> None:
    scaled = ScalingEngine().scale(Ingredient("Salz", 2, "g"), 4, 400)

    assert scaled.category == IngredientCategory.SPICE
    assert scaled.scaling_factor == 37
    assert scaled.scaled_quantity == 74
    assert 50 < scaled.scaled_quantity < 100
    assert scaled.note.startswith("Gewürze skalieren gedämpft")


def test_scaling_down_uses_the_same_curve() -> None:
    scaled = ScalingEngine().scale(Ingredient("Salz", 10, "g"), 4, 1)

    expected_factor = 0.7 * math.sqrt(0.25) + 0.3 * 0.25
    assert scaled.scaling_factor == pytest.approx(expected_factor, abs=0.01)
    assert scaled.scaled_quantity == pytest.approx(10 * expected_factor, abs=0.01)


DAMPENED = [
    ("Hefe", IngredientCategory.LEAVENING),
    ("Butterschmalz", IngredientCategory.COOKING_FAT),
    ("Rinderbrühe", IngredientCategory.LIQUID),
]


@pytest.mark.parametrize(("name", "category"), DAMPENED)
@pytest.mark.parametrize("ratio", [2, 10, 100, 1000])
def test_other_categories_sit_between_spice_and_linear(
    name: str, category: IngredientCategory, ratio: int
) -> None:
    engine = ScalingEngine()

    scaled = engine.scale(Ingredient(name, 100, "g"), 4, 4 * ratio)
    spice = engine.scale(Ingredient("Salz", 100, "g"), 4, 4 * ratio)

    assert scaled.category == category
    assert spice.scaling_factor < scaled.scaling_factor < ratio


@pytest.mark.parametrize("category", [category for _, category in DAMPENED])
@pytest.mark.parametrize("ratio", [0.01, 0.25, 0.5])
def test_other_categories_sit_between_linear_and_spice_when_scaling_down(
    category: IngredientCategory, ratio: float
) -> None:
    curves = default_curves()

    factor = curves[category].factor(ratio)

    assert ratio < factor < curves[IngredientCategory.SPICE].factor(ratio)


@pytest.mark.parametrize("weight", [-0.1, 0.7, 1.0])
def test_dampened_weights_must_stay_below_the_spice_weight(weight: float) -> None:
    with pytest.raises(ValueError):
        default_curves(cooking_fat_sqrt_weight=weight)


def test_curves_are_injectable() -> None:
    curves = default_curves(liquid_sqrt_weight=0.0)
    engine = ScalingEngine(curves=curves)

    scaled = engine.scale(Ingredient("Brühe", 1, "l"), 2, 20)

    assert scaled.scaling_factor == 10


def test_unit_passes_through_unchanged() -> None:
    scaled = ScalingEngine().scale(Ingredient("Eier", 3, "Stück"), 2, 4)

    assert scaled.unit == "Stück"
    assert scaled.scaled_quantity == 6


def test_scaled_quantity_is_never_negative() -> None:
    scaled = ScalingEngine().scale(Ingredient("Mehl", -5, "g"), 1, 2)

    assert scaled.scaled_quantity == 0


@pytest.mark.parametrize(("reference", "target"), [(4, 0), (4, -2), (0, 10)])
def test_non_positive_servings_are_rejected(reference: int, target: int) -> None:
    with pytest.raises(InvalidServingsError):
        ScalingEngine().scale(Ingredient("Mehl", 100, "g"), reference, target)


def test_scale_all_validates_before_scaling() -> None:
    with pytest.raises(InvalidServingsError):
        ScalingEngine().scale_all([], 4, 0)


def test_scaling_is_idempotent() -> None:
    engine = ScalingEngine()
    ingredients = [Ingredient("Salz", 2, "g"), Ingredient("Mehl", 500, "g")]

    first = engine.scale_all(ingredients, 4, 250)
    second = engine.scale_all(ingredients, 4, 250)

    assert first == second


def test_scaling_curve_factor() -> None:
    curve = ScalingCurve(sqrt_weight=0.7, linear_weight=0.3)

    assert curve.factor(100) == pytest.approx(37)
    assert curve.factor(1) == pytest.approx(1)
