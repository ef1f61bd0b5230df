"""Pydantic models for the HTTP API."""

from pydantic import BaseModel, Field

from recipe_finder.domain.recipes import (
    NewUserRecipe,
    RecipeDetails,
    RecipeSummary,
    UserRecipe,
    instruction_paragraphs,
)


class RecipeSummaryModel(BaseModel):
    """Search result or favorite as exchanged with clients."""

    id: int | str
    title: str
    image: str | None = None
    used_ingredient_count: int = 0
    missed_ingredient_count: int = 0
    cooking_time_minutes: int | None = None
    is_vegetarian: bool | None = None

    @classmethod
    def from_domain(cls, recipe: RecipeSummary) -> "RecipeSummaryModel":
        return cls(
            id=recipe.id,
            title=recipe.title,
            image=recipe.image,
            used_ingredient_count=recipe.used_ingredient_count,
            missed_ingredient_count=recipe.missed_ingredient_count,
            cooking_time_minutes=recipe.cooking_time_minutes,
            is_vegetarian=recipe.is_vegetarian,
        )

    def to_domain(self) -> RecipeSummary:
        return RecipeSummary(
            id=self.id,
            title=self.title,
            image=self.image,
            used_ingredient_count=self.used_ingredient_count,
            missed_ingredient_count=self.missed_ingredient_count,
            cooking_time_minutes=self.cooking_time_minutes,
            is_vegetarian=self.is_vegetarian,
        )


class RecipeDetailsModel(BaseModel):
    """Full remote recipe details."""

    id: int | str
    title: str
    image: str | None
    ready_in_minutes: int | None
    servings: int | None
    vegetarian: bool
    ingredients: list[str]
    instructions: str | None

    @classmethod
    def from_domain(cls, details: RecipeDetails) -> "RecipeDetailsModel":
        return cls(
            id=details.id,
            title=details.title,
            image=details.image,
            ready_in_minutes=details.ready_in_minutes,
            servings=details.servings,
            vegetarian=details.vegetarian,
            ingredients=details.ingredients,
            instructions=details.instructions,
        )


class NewUserRecipeModel(BaseModel):
    """Form payload for creating a user recipe."""

    title: str = ""
    ingredients: str = ""
    instructions: str = ""
    cooking_time: str | int = ""
    servings: str | int = ""
    image_path: str = ""

    def to_domain(self) -> NewUserRecipe:
        return NewUserRecipe(
            title=self.title,
            ingredients_text=self.ingredients,
            instructions=self.instructions,
            cooking_time=self.cooking_time,
            servings=self.servings,
            image_path=self.image_path,
        )


class UserRecipeModel(BaseModel):
    """A user recipe with instructions pre-split into paragraphs."""

    id: str
    title: str
    ingredients: list[str]
    instructions: str
    instruction_paragraphs: list[str] = Field(default_factory=list)
    cooking_time: str
    servings: str
    image: str

    @classmethod
    def from_domain(cls, recipe: UserRecipe) -> "UserRecipeModel":
        return cls(
            id=recipe.id,
            title=recipe.title,
            ingredients=recipe.ingredients,
            instructions=recipe.instructions,
            instruction_paragraphs=instruction_paragraphs(recipe.instructions),
            cooking_time=recipe.cooking_time,
            servings=recipe.servings,
            image=recipe.image,
        )


class FavoriteToggleResponse(BaseModel):
    """Result of toggling a favorite."""

    id: int | str
    is_favorite: bool
