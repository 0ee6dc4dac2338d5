"""ASGI entrypoint for the ReelDine API."""

from reeldine.api.app import create_app
from reeldine.containers import build_container

app = create_app(build_container())
