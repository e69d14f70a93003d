"""Blueprint registrations for the ``/api/v1`` surface."""

from flask import Flask

from . import calculations, config, localization

_BLUEPRINTS = (calculations.blueprint, config.blueprint, localization.blueprint)


def register_routes(app: Flask) -> None:
    """Attach the calculation, configuration and translation blueprints."""

    for blueprint in _BLUEPRINTS:
        app.register_blueprint(blueprint)
