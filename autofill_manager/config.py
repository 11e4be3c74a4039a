"""
Configuration constants for the Autofill Manager application.
"""

import os
import platform
from typing import Optional

# Application Metadata
APP_VERSION = "0.1.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "Autofill Manager"  # Use: Full name of the application. Type: str. Range: Any valid string.
APP_TITLE_PREFIX = f"{APP_NAME} v{APP_VERSION}"  # Use: Prefix for the application window titles, combining name and version. Type: str (f-string). Range: Derived from APP_NAME and APP_VERSION.
# Use: Legal disclaimer displayed above the record table. Type: str (multi-line). Range: Any valid string.
APP_DISCLAIMER = """\
This tool is for personal use only. It reads and deletes form data stored by
the browser on this device. Use it only on devices you own or administer, and
close the browser first: a running browser keeps the database locked.
"""

# Database Settings
TARGET_PATH_ENV_VAR = "AUTOFILL_MANAGER_DB_PATH"  # Use: Environment variable overriding the database location. Type: str. Range: Any valid environment variable name.
WEB_DATA_FILE = "Web Data"  # Use: Filename of the SQLite database holding autofill data in Chromium-based browsers. Type: str. Range: "Web Data"
EDGE_PROFILE_DIRS = {  # Use: Default Edge profile directory per platform, relative to the platform's base directory. Type: dict[str, str]. Range: Dictionary with platform.system() names as keys.
    "Windows": os.path.join("Microsoft", "Edge", "User Data", "Default"),
    "Darwin": os.path.join("Library", "Application Support", "Microsoft Edge", "Default"),
    "Linux": os.path.join(".config", "microsoft-edge", "Default"),
}
SQLITE_TIMEOUT_SECONDS = 5.0  # Use: Seconds SQLite waits for a lock held by another process before failing. Type: float. Range: Non-negative number.
DEFAULT_TABLE = "autofill"  # Use: Table selected when the main window opens. Type: str. Range: Any table name in the Web Data schema.
DELETE_KEY_COLUMNS = ("name", "value")  # Use: Columns matched by delete_record. Type: tuple[str, str]. Range: Fixed for the autofill schema.

# UI Settings
APP_STYLE = 'Fusion'  # Use: PyQt5 application style. Type: str. Range: Valid PyQt5 style names (e.g., 'Fusion', 'Windows', 'Macintosh').
WINDOW_GEOMETRY = (100, 100, 1000, 600)  # Use: Initial main window position and size (x, y, width, height). Type: tuple[int, int, int, int]. Range: Positive integers.
STATUS_MESSAGE_TIMEOUT_MS = 3000  # Use: How long transient status bar messages stay visible, in milliseconds. Type: int. Range: Positive integer.

# File and Directory Names
CONFIG_DIR_NAME = ".autofill_manager"  # Use: Name of the hidden directory within the user's home directory where the application stores its logs. Type: str. Range: Any valid directory name.
LOG_DIR_NAME = "logs"  # Use: Subdirectory of CONFIG_DIR_NAME holding log files. Type: str. Range: Any valid directory name.
AUDIT_LOG_FILE = "audit.log"  # Use: Filename for the audit log of destructive actions. Type: str. Range: Any valid filename.


def default_target_path(system: Optional[str] = None) -> str:
    """
    Location of the Edge Web Data database for the given platform.

    Returns an empty string when the platform is unknown or its base
    directory cannot be determined.
    """
    system = system or platform.system()
    profile_dir = EDGE_PROFILE_DIRS.get(system)
    if profile_dir is None:
        return ""
    if system == "Windows":
        base = os.environ.get("LOCALAPPDATA", "")
        if not base:
            return ""
    else:
        base = os.path.expanduser("~")
    return os.path.join(base, profile_dir, WEB_DATA_FILE)


def resolve_target_path() -> str:
    """The database path, honouring the environment override."""
    override = os.environ.get(TARGET_PATH_ENV_VAR, "").strip()
    if override:
        return override
    return default_target_path()


def audit_log_path() -> str:
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, LOG_DIR_NAME, AUDIT_LOG_FILE)


TARGET_PATH = resolve_target_path()  # Use: Database location computed once at startup. Type: str. Range: Filesystem path or "".
