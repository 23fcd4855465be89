"""ASGI entrypoint for the kitchen analytics API."""

from kitchen_analytics.api.app import create_app
from kitchen_analytics.containers import build_container

app = create_app(build_container())
