"""ASGI entrypoint for the diet insights API."""

from diet_insights.api.app import create_app
from diet_insights.containers import build_container

app = create_app(build_container())
