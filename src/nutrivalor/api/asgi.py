"""ASGI entrypoint for the nutrivalor API."""

from nutrivalor.api.app import create_app
from nutrivalor.containers import build_container

app = create_app(build_container())
