"""ASGI entrypoint for the photo relay bot."""

from photo_relay.api.app import create_app
from photo_relay.containers import build_container

app = create_app(build_container())
