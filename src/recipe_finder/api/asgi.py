"""ASGI entrypoint for the recipe finder API."""

from recipe_finder.api.app import create_app
from recipe_finder.containers import build_container

app = create_app(build_container())
