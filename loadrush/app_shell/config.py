import logging
import os
import sys

from loadrush.rules.models import Rules

logger = logging.getLogger(__name__)


def missing_env(rules: Rules) -> list[str]:
    """Required environment variables that are not set."""
    return [name for name in rules.ops.required_env if name not in os.environ]


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.

    Exits the process when a required environment variable is missing.
    """
    missing = missing_env(rules)
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    if not os.environ.get(rules.ops.cron_secret_env):
        # Cron endpoints answer 503 until the secret is configured.
        logger.warning("%s is not set; cron endpoints are disabled", rules.ops.cron_secret_env)

    logger.info("Configuration validated.")
