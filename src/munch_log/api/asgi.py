"""ASGI entrypoint for the MunchLog web app."""

from munch_log.api.app import create_app
from munch_log.containers import build_container

app = create_app(build_container())
