"""Keyword classification of ingredients into scaling categories."""

from dataclasses import dataclass

from kitchen_analytics.domain.scaling import IngredientCategory


@dataclass(frozen=True)
class ClassificationRule:
    """Assigns ``category`` when any keyword occurs in the ingredient name."""

    category: IngredientCategory
    keywords: tuple[str, ...]

    def matches(self, normalized_name: str) -> bool:
        """Return True if the lower-cased name contains one of the keywords."""
        return any(keyword in normalized_name for keyword in self.keywords)


# Evaluated top to bottom, first match wins. Frying fats must stay first:
# plain "öl" or "butter" is Standard, only the frying variants are fats.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        IngredientCategory.COOKING_FAT,
        (
            "öl (zum braten)",
            "öl zum braten",
            "butter (zum braten)",
            "butter zum braten",
            "butterschmalz",
            "schmalz",
            "bratfett",
            "bratöl",
            "frying oil",
            "oil for frying",
            "lard",
            "ghee",
        ),
    ),
    ClassificationRule(
        IngredientCategory.SPICE,
        (
            "salz",
            "pfeffer",
            "paprika",
            "oregano",
            "basilikum",
            "thymian",
            "rosmarin",
            "majoran",
            "kümmel",
            "koriander",
            "zimt",
            "muskat",
            "nelke",
            "curry",
            "chili",
            "ingwer",
            "knoblauch",
            "zwiebel",
            "kurkuma",
            "kardamom",
            "safran",
            "vanille",
            "gewürz",
            "kraut",
            "petersilie",
            "schnittlauch",
            "dill",
            "estragon",
            "lorbeer",
            "salt",
            "pepper",
            "cinnamon",
            "nutmeg",
            "garlic",
            "thyme",
            "rosemary",
            "spice",
        ),
    ),
    ClassificationRule(
        IngredientCategory.LEAVENING,
        (
            "backpulver",
            "trockenhefe",
            "hefe",
            "gelatine",
            "natron",
            "pektin",
            "agar",
            "baking powder",
            "baking soda",
            "yeast",
        ),
    ),
    ClassificationRule(
        IngredientCategory.LIQUID,
        (
            "brühe",
            "fond",
            "sahne",
            "rahm",
            "suppe",
            "sauce",
            "soße",
            "wein",
            "stock",
            "bouillon",
            "schlagobers",
            "obers",
            "broth",
            "cream",
        ),
    ),
)


@dataclass(frozen=True)
class IngredientClassifier:
    """Maps ingredient display names to scaling categories."""

    rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES

    def classify(self, name: str) -> IngredientCategory:
        """Return the category of the first matching rule, else Standard."""
        normalized = name.lower().strip()
        for rule in self.rules:
            if rule.matches(normalized):
                return rule.category
        return IngredientCategory.STANDARD
