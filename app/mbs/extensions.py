from __future__ import annotations

from flask import Flask, current_app

from app.mbs.auth_provider import AuthProvider, auth_provider_from_config
from app.mbs.db import init_db
from app.mbs.gateway import PersistenceGateway, gateway_from_engine
from app.mbs.notify import Mailer, mailer_from_config

GATEWAY_KEY = "mbs_gateway"
MAILER_KEY = "mbs_mailer"
AUTH_KEY = "mbs_auth_provider"


def init_services(app: Flask) -> None:
    """Build the external service handles once per process from app.config."""
    engine = init_db(app)
    app.extensions[GATEWAY_KEY] = gateway_from_engine(engine)
    app.extensions[MAILER_KEY] = mailer_from_config(app.config)
    app.extensions[AUTH_KEY] = auth_provider_from_config(app.config)


def get_gateway(app: Flask | None = None) -> PersistenceGateway:
    return (app or current_app).extensions[GATEWAY_KEY]


def get_mailer(app: Flask | None = None) -> Mailer:
    return (app or current_app).extensions[MAILER_KEY]


def get_auth_provider(app: Flask | None = None) -> AuthProvider:
    return (app or current_app).extensions[AUTH_KEY]


def service_status(app: Flask | None = None) -> dict[str, bool]:
    return {
        "datastore": get_gateway(app).configured,
        "email": get_mailer(app).configured,
        "auth": get_auth_provider(app).configured,
    }
