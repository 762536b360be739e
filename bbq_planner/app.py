"""Flask JSON API for BBQ Planner.

Exposes the shopping list generator to a browser or any HTTP client.
The API is stateless: every request builds a fresh list and nothing is
stored between requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pydantic
from flask import Flask, jsonify, request

from bbq_planner.aggregator import to_dict
from bbq_planner.generation_client import ServiceError, make_generation_client
from bbq_planner.models import MEAT_OPTIONS, SEAFOOD_OPTIONS, Preferences
from bbq_planner.normalizer import ParseError
from bbq_planner.planner import (
    ValidationError,
    request_shopping_list,
    user_message,
)

if TYPE_CHECKING:
    from werkzeug.wrappers import Response

    from bbq_planner.config import Config
    from bbq_planner.planner import Generator

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    generator: Generator | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Application configuration. Loaded from the environment
            when omitted.
        generator: Generation client. Built from ``config`` when omitted.

    Returns:
        Configured Flask application instance.
    """
    if config is None:
        from bbq_planner.config import load_config

        config = load_config()
    if generator is None:
        generator = make_generation_client(config)

    app = Flask(__name__)
    app.config["BBQ_CONFIG"] = config
    app.config["BBQ_GENERATOR"] = generator

    _register_error_handlers(app)
    _register_routes(app)

    return app


def _error(message: str, status: int) -> tuple[Response, int]:
    """Build a JSON error response.

    Args:
        message: User-facing error message.
        status: HTTP status code.

    Returns:
        Tuple of JSON response and status code.
    """
    return jsonify({"error": message}), status


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(404)
    def not_found(error: Exception) -> tuple[Response, int]:
        """Handle 404 Not Found errors."""
        return _error("Not Found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error: Exception) -> tuple[Response, int]:
        """Handle 405 Method Not Allowed errors."""
        return _error("Method Not Allowed", 405)

    @app.errorhandler(500)
    def server_error(error: Exception) -> tuple[Response, int]:
        """Handle 500 Internal Server Error."""
        return _error("Internal Server Error", 500)


def _register_routes(app: Flask) -> None:
    """Register all application routes.

    Args:
        app: Flask application instance.
    """

    @app.route("/api/options")
    def options() -> Response:
        """Return the suggested meat and seafood choices.

        Returns:
            JSON with ``meat`` and ``seafood`` lists.
        """
        return jsonify({"meat": list(MEAT_OPTIONS), "seafood": list(SEAFOOD_OPTIONS)})

    @app.route("/api/shopping-list", methods=["POST"])
    def shopping_list() -> Response | tuple[Response, int]:
        """Generate a shopping list from posted preferences.

        Returns:
            JSON payload with the list, total and plain text, or a JSON
            error with status 400 (bad preferences) or 502 (generation
            failed).
        """
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("Request body must be a JSON object.", 400)

        try:
            prefs = Preferences.model_validate(payload)
        except pydantic.ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            return _error(f"Invalid preferences: {errors}", 400)

        generator = app.config["BBQ_GENERATOR"]
        try:
            result = request_shopping_list(prefs, generator)
        except ValidationError as exc:
            return _error(user_message(exc), 400)
        except (ServiceError, ParseError) as exc:
            logger.warning("Shopping list generation failed: %s", exc)
            return _error(user_message(exc), 502)

        return jsonify(to_dict(result))
