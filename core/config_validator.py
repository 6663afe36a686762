# core/config_validator.py

from typing import List
from core.config import settings, DEFAULT_BOOTSTRAP_EMAIL
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of warnings.
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")

    if settings.BOOTSTRAP_ADMIN_EMAIL == DEFAULT_BOOTSTRAP_EMAIL:
        warnings.append(
            f"BOOTSTRAP_ADMIN_EMAIL is still the placeholder {DEFAULT_BOOTSTRAP_EMAIL}"
        )

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError in production if critical config is missing;
    elsewhere missing credentials are only logged.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "production":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Configuration warning: {warning}")

    logger.info("Configuration validation passed")
