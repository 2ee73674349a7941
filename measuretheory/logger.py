"""measuretheory logger.

This module provides the main logger instance for the measuretheory package.
It routes Python's warnings through the logging system and creates a logger
named "measuretheory" for use throughout the package.
"""

import logging

# Warnings issued through the warnings module are handled as log records.
logging.captureWarnings(True)

# Main logger instance for the measuretheory package.
# Import it directly: `from measuretheory.logger import MEASURETHEORY_LOGGER`
MEASURETHEORY_LOGGER: logging.Logger = logging.getLogger("measuretheory")
