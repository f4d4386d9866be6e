# --- START OF FILE logging_config.py ---

# =============================================================================
# LOGGING SETUP
# =============================================================================
# Entry points (API, CLI) call setup_logging() once; library modules only ever
# create module-level loggers with logging.getLogger(__name__).

import logging
from typing import Optional

from config_manager import get_config

_configured = False

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configures the root logger from the `logging` config section.

    Args:
        level: Optional explicit level name that overrides the configured one.
    """
    global _configured
    config = get_config()
    level_name = (level or config.get('logging.level', 'INFO')).upper()
    fmt = config.get('logging.format', '%(asctime)s - %(levelname)s - %(name)s - %(message)s')

    if _configured:
        logging.getLogger().setLevel(level_name)
        return

    logging.basicConfig(level=level_name, format=fmt)
    _configured = True

# --- END OF FILE logging_config.py ---
