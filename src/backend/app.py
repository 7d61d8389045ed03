"""Main Quart application for the OralGen backend."""

import logging

from quart import Quart, jsonify
from quart_cors import cors

from oralgen import __version__
from oralgen.config import settings
from src.backend.api.export import export_bp
from src.backend.config import get_config


def create_app(config_name: str = "development") -> Quart:
    """Create and configure the Quart application.

    Args:
        config_name: Configuration environment name

    Returns:
        Configured Quart app
    """
    app = Quart(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)

    logging.basicConfig(level=settings.log_level)

    # Enable CORS for frontend (only needed in development)
    if config.DEBUG:
        app = cors(
            app,
            allow_origin=config.CORS_ORIGINS,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # Register blueprints
    app.register_blueprint(export_bp)

    # Register routes
    register_routes(app)

    return app


def register_routes(app: Quart) -> None:
    """Register API routes.

    Args:
        app: Quart application
    """

    @app.route("/api/health", methods=["GET"])
    async def health_check():
        """Health check endpoint."""
        return jsonify(
            {
                "status": "healthy",
                "service": "oralgen-backend",
                "version": __version__,
            }
        )

    @app.route("/api/info", methods=["GET"])
    async def info():
        """Get API information."""
        return jsonify(
            {
                "service": "OralGen API",
                "version": __version__,
                "producer": settings.producer_name,
                "endpoints": {
                    "health": "/api/health",
                    "info": "/api/info",
                    "normalize": "/api/normalize",
                    "families": "/api/families",
                    "export": "/api/export",
                },
            }
        )


# Create app instance
app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5001, debug=True)
