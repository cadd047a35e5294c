APP_NAME = "WolfCafe Items"
APP_VERSION = "1.0.0"
APP_TITLE = f"{APP_NAME} v{APP_VERSION}"

# QSettings identifiers
SETTINGS_ORG = "WolfCafe"
SETTINGS_APP = "WolfCafeItems"

# Default paths
DB_PATH = "database/wolfcafe.db"
LOG_DIR = "logs"
LOG_APP_NAME = "wolfcafe"

DEFAULT_UPDATE_WORKERS = 4
