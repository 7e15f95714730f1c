# logger.py
# Console logger shared by every PSO_ENGINE module.
# Usage: log_info("message", module_name) with module_name = Path(__file__).stem

import sys
import datetime
import os

# --- Configuration ---
# Set to False to disable color output (e.g., if logging to a file)
ENABLE_COLOR = True
# Colors are only emitted when stdout is an interactive terminal
IS_TERMINAL = sys.stdout.isatty()


# --- ANSI Escape Codes ---
class Colors:
    RESET = "\033[0m"
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[0;33m"
    BLUE = "\033[0;34m"
    PURPLE = "\033[0;35m"
    CYAN = "\033[0;36m"
    WHITE = "\033[0;37m"
    BOLD_RED = "\033[1;31m"
    BOLD_GREEN = "\033[1;32m"
    BOLD_YELLOW = "\033[1;33m"
    BOLD_BLUE = "\033[1;34m"


# --- Color Mapping ---
COLOR_MAP = {
    "default": Colors.RESET,
    "red": Colors.RED,
    "green": Colors.GREEN,
    "yellow": Colors.YELLOW,
    "blue": Colors.BLUE,
    "purple": Colors.PURPLE,
    "cyan": Colors.CYAN,
    "white": Colors.WHITE,
    # --- Semantic Mappings ---
    "error": Colors.BOLD_RED,
    "warning": Colors.BOLD_YELLOW,
    "info": Colors.CYAN,
    "success": Colors.BOLD_GREEN,
    "debug": Colors.PURPLE,
    "header": Colors.BOLD_BLUE,
    "detail": Colors.WHITE,
}

DEFAULT_COLOR_CODE = Colors.RESET

# --- Levels ---
# Messages below the active threshold are dropped.
LOG_LEVELS = {
    "debug": 10,
    "detail": 15,
    "info": 20,
    "success": 25,
    "header": 25,
    "warning": 30,
    "error": 40,
}

_active_level = LOG_LEVELS.get(os.environ.get("PSO_ENGINE_LOG_LEVEL", "info").lower(), LOG_LEVELS["info"])


def set_log_level(level_name: str):
    """
    Sets the minimum level that is printed.

    Args:
        level_name (str): One of the keys of LOG_LEVELS (e.g. "debug", "warning").
    """
    global _active_level
    key = level_name.lower()
    if key not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level_name}'. Available: {list(LOG_LEVELS.keys())}")
    _active_level = LOG_LEVELS[key]


def get_log_level() -> str:
    """Returns the name of the active level threshold."""
    for name, value in LOG_LEVELS.items():
        if value == _active_level:
            return name
    return str(_active_level)


def log(message: str, module_name: str = "INFO", color_name: str = "default", level: str = "info"):
    """
    Prints a formatted log message to the console with color.

    Args:
        message (str): The message to print.
        module_name (str): The name of the calling module (usually Path(__file__).stem).
        color_name (str): The name of the color to use (e.g., "red", "info", "warning").
        level (str): Level used against the active threshold.
    """
    if LOG_LEVELS.get(level, LOG_LEVELS["info"]) < _active_level:
        return

    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    color_code = COLOR_MAP.get(color_name.lower(), DEFAULT_COLOR_CODE)
    reset_code = Colors.RESET

    if not (ENABLE_COLOR and IS_TERMINAL):
        color_code = ""
        reset_code = ""

    padded_module = f"[{module_name:<25}]"
    formatted_message = f"{timestamp} {padded_module} {color_code}{message}{reset_code}"

    print(formatted_message, file=sys.stdout)
    sys.stdout.flush()


# --- Helper Functions for Common Levels ---

def log_error(message: str, module_name: str = "ERROR"):
    """Logs an error message."""
    log(message, module_name, "error", "error")


def log_warning(message: str, module_name: str = "WARNING"):
    """Logs a warning message."""
    log(message, module_name, "warning", "warning")


def log_info(message: str, module_name: str = "INFO"):
    """Logs an informational message."""
    log(message, module_name, "info", "info")


def log_success(message: str, module_name: str = "SUCCESS"):
    """Logs a success message."""
    log(message, module_name, "success", "success")


def log_debug(message: str, module_name: str = "DEBUG"):
    """Logs a debug message (only shown at level 'debug')."""
    log(message, module_name, "debug", "debug")


def log_header(message: str, module_name: str = "HEADER"):
    """Logs a header/section title message."""
    log(message, module_name, "header", "header")
