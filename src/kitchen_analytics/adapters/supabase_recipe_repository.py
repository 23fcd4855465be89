"""Supabase-backed recipe repository."""

from dataclasses import dataclass

from supabase import Client

from kitchen_analytics.domain.scaling import Ingredient, RecipeRecord
from kitchen_analytics.services.scaling import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipe reads."""

    client: Client

    def get_recipe(self, recipe_id: int) -> RecipeRecord | None:
        """Return a recipe header by id."""
        response = (
            self.client.table("recipes")
            .select("id, name, category, portions")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        portions = row.get("portions")
        return RecipeRecord(
            id=int(row["id"]),
            name=str(row.get("name") or ""),
            category=row.get("category"),
            portions=int(portions) if portions is not None else None,
        )

    def list_ingredients(self, recipe_id: int) -> list[Ingredient]:
        """Return the ingredient lines of a recipe."""
        response = (
            self.client.table("ingredients")
            .select("name, amount, unit")
            .eq("recipe_id", recipe_id)
            .order("id", desc=False)
            .execute()
        )
        return [
            Ingredient(
                name=str(row.get("name") or ""),
                quantity=float(row.get("amount") or 0.0),
                unit=str(row.get("unit") or ""),
            )
            for row in response.data or []
        ]
