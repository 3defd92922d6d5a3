"""Centralized path definitions for the zenmail application.

All paths hang off a single base directory so tests and alternative
installations can relocate everything by setting ``ZENMAIL_HOME``.
"""

import os
from pathlib import Path

# Base application directory
ZENMAIL_DIR = Path(os.environ.get("ZENMAIL_HOME", Path.home() / ".zenmail"))

# Subdirectories
LOGS_DIR = ZENMAIL_DIR / "logs"

# Specific files
CONFIG_PATH = ZENMAIL_DIR / "config.json"

# Keyring service name for stored account secrets
KEYRING_SERVICE = "zenmail"
