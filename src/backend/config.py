"""Backend configuration for the OralGen export API."""


class Config:
    """Base configuration."""

    # App settings
    DEBUG = True
    TESTING = False

    # CORS settings
    CORS_ORIGINS = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ]

    # Request settings
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # Extraction payloads are small JSON documents


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = False
    TESTING = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


# Config factory
def get_config(env: str = "development") -> Config:
    """Get configuration based on environment.

    Args:
        env: Environment name (development, testing, production)

    Returns:
        Configuration object
    """
    configs = {
        "development": DevelopmentConfig,
        "testing": TestingConfig,
        "production": ProductionConfig,
    }
    return configs.get(env, DevelopmentConfig)()
