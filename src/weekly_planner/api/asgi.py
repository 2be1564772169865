"""ASGI entrypoint for the weekly planner API."""

from weekly_planner.api.app import create_app
from weekly_planner.containers import build_container

app = create_app(build_container())
