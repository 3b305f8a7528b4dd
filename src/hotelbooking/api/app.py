"""ASGI application instance for the reservation API."""

from hotelbooking.api.factory import create_app
from hotelbooking.infra.settings import load_settings
from hotelbooking.observability.logging import configure_root_logging

configure_root_logging(load_settings().log_level)

app = create_app()
