"""Recipe domain models."""

from dataclasses import dataclass

RecipeId = int | str


@dataclass(frozen=True)
class RecipeSummary:
    """Search result from the remote catalog, optionally enriched."""

    id: RecipeId
    title: str
    image: str | None
    used_ingredient_count: int
    missed_ingredient_count: int
    cooking_time_minutes: int | None = None
    is_vegetarian: bool | None = None


@dataclass(frozen=True)
class RecipeDetails:
    """Full recipe information from the remote catalog."""

    id: RecipeId
    title: str
    image: str | None
    ready_in_minutes: int | None
    servings: int | None
    vegetarian: bool
    ingredients: list[str]
    instructions: str | None


@dataclass(frozen=True)
class NewUserRecipe:
    """Raw form input for a user-authored recipe."""

    title: str
    ingredients_text: str
    instructions: str
    cooking_time: str | int
    servings: str | int
    image_path: str


@dataclass(frozen=True)
class UserRecipe:
    """A user-authored recipe stored locally."""

    id: str
    title: str
    ingredients: list[str]
    instructions: str
    cooking_time: str
    servings: str
    image: str


def same_recipe_id(left: RecipeId, right: RecipeId) -> bool:
    """Compare recipe ids by their string form."""
    return str(left) == str(right)


def split_ingredients(text: str) -> list[str]:
    """Split multi-line ingredient text into one entry per non-blank line."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def instruction_paragraphs(instructions: str) -> list[str]:
    """Split free-text instructions into display paragraphs."""
    return [line.strip() for line in instructions.splitlines() if line.strip()]


def optional_int(value: object) -> int | None:
    """Coerce numeric values to int, returning None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
