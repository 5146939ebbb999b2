"""ASGI entrypoint for the Munchy API."""

from munchy.api.app import create_app
from munchy.containers import build_container

app = create_app(build_container())
