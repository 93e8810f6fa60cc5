"""Package-wide logger; the library installs no handlers."""
import logging

logger = logging.getLogger("pennant")
