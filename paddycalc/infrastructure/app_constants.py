APP_NAME = "MRS Paddy Calculator"
APP_VERSION = "1.4.0"
APP_TITLE = f"{APP_NAME} v{APP_VERSION}"

# Keep QSettings identifiers consistent to avoid breaking existing settings.
SETTINGS_ORG = "MRSTraders"
SETTINGS_APP = "PaddyCalculator"

# Versioned key for the persisted session blob.
SESSION_KEY = "session/paddy-calculator-v2"

# Default paths
LOG_DIR = "logs"
