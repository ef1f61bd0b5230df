"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from recipe_finder.api.models import (
    FavoriteToggleResponse,
    NewUserRecipeModel,
    RecipeDetailsModel,
    RecipeSummaryModel,
    UserRecipeModel,
)
from recipe_finder.app_logging import configure_logging
from recipe_finder.containers import AppContainer
from recipe_finder.domain.errors import (
    NetworkError,
    RecipeFinderError,
    StorageError,
    ValidationError,
)

_ERROR_STATUS: dict[type[RecipeFinderError], int] = {
    ValidationError: 422,
    NetworkError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RecipeFinderError)
    async def handle_recipe_finder_error(
        request: Request, exc: RecipeFinderError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(
            type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        logger.info("Request %s failed: %s", request.url.path, exc)
        content: dict[str, object] = {"error": exc.user_message}
        if isinstance(exc, ValidationError):
            content["missing_fields"] = list(exc.missing_fields)
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/recipes/search")
    async def search_recipes(
        ingredients: str, request: Request
    ) -> dict[str, list[RecipeSummaryModel]]:
        """Search the remote catalog by a comma separated ingredient list."""
        state_container: AppContainer = request.app.state.container
        results = await state_container.search_service.search(ingredients)
        return {"recipes": [RecipeSummaryModel.from_domain(item) for item in results]}

    @app.get("/recipes/{recipe_id}")
    async def recipe_details(recipe_id: str, request: Request) -> RecipeDetailsModel:
        """Return full details for a remote recipe."""
        state_container: AppContainer = request.app.state.container
        details = await state_container.search_service.get_details(recipe_id)
        return RecipeDetailsModel.from_domain(details)

    @app.get("/favorites")
    async def list_favorites(request: Request) -> dict[str, list[RecipeSummaryModel]]:
        """Return favorited recipes in the order they were liked."""
        state_container: AppContainer = request.app.state.container
        favorites = await state_container.favorites_service.list_favorites()
        return {
            "recipes": [RecipeSummaryModel.from_domain(item) for item in favorites]
        }

    @app.post("/favorites", status_code=status.HTTP_201_CREATED)
    async def add_favorite(
        recipe: RecipeSummaryModel, request: Request
    ) -> FavoriteToggleResponse:
        """Add a recipe to favorites; adding twice is a no-op."""
        state_container: AppContainer = request.app.state.container
        await state_container.favorites_service.add(recipe.to_domain())
        return FavoriteToggleResponse(id=recipe.id, is_favorite=True)

    @app.post("/favorites/toggle")
    async def toggle_favorite(
        recipe: RecipeSummaryModel, request: Request
    ) -> FavoriteToggleResponse:
        """Flip the favorite state of a recipe."""
        state_container: AppContainer = request.app.state.container
        is_favorite = await state_container.favorites_service.toggle(
            recipe.to_domain()
        )
        return FavoriteToggleResponse(id=recipe.id, is_favorite=is_favorite)

    @app.delete("/favorites/{recipe_id}")
    async def remove_favorite(recipe_id: str, request: Request) -> dict[str, bool]:
        """Remove a recipe from favorites."""
        state_container: AppContainer = request.app.state.container
        removed = await state_container.favorites_service.remove(recipe_id)
        return {"removed": removed}

    @app.get("/my-recipes")
    async def list_user_recipes(request: Request) -> dict[str, list[UserRecipeModel]]:
        """Return recipes authored by the user."""
        state_container: AppContainer = request.app.state.container
        recipes = await state_container.user_recipe_service.list_recipes()
        return {"recipes": [UserRecipeModel.from_domain(item) for item in recipes]}

    @app.post("/my-recipes", status_code=status.HTTP_201_CREATED)
    async def create_user_recipe(
        payload: NewUserRecipeModel, request: Request
    ) -> UserRecipeModel:
        """Create a user recipe from form input."""
        state_container: AppContainer = request.app.state.container
        recipe = await state_container.user_recipe_service.create_recipe(
            payload.to_domain()
        )
        return UserRecipeModel.from_domain(recipe)

    @app.get("/my-recipes/{recipe_id}")
    async def user_recipe_details(recipe_id: str, request: Request) -> UserRecipeModel:
        """Return one user recipe."""
        state_container: AppContainer = request.app.state.container
        recipe = await state_container.user_recipe_service.get_recipe(recipe_id)
        if recipe is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No details found for this recipe.",
            )
        return UserRecipeModel.from_domain(recipe)

    @app.delete("/my-recipes/{recipe_id}")
    async def delete_user_recipe(recipe_id: str, request: Request) -> dict[str, bool]:
        """Delete a user recipe."""
        state_container: AppContainer = request.app.state.container
        removed = await state_container.user_recipe_service.delete_recipe(recipe_id)
        return {"removed": removed}

    return app
