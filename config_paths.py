import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "cellgrid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
MESSAGES_PATH = os.path.join(CONFIG_DIR, "messages.json")
LOG_PATH = os.path.join(CONFIG_DIR, "cellgrid.log")

# default settings
GRID_DEFAULTS = {
    "row_height": 1,
    "buffer_rows": 5,
    "row_batch": 100,
    "row_ceiling": 10_000,
    "more_rows_threshold": 10,
    "max_range_cells": 100_000,
    "coerce_numbers": False,
}
MESSAGES_MAX_ITEMS_DEFAULT = 4


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def load_config():
    cfg = {
        "GRID": dict(GRID_DEFAULTS),
        "MESSAGES_MAX_ITEMS": MESSAGES_MAX_ITEMS_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    grid = data.get("grid")
    if isinstance(grid, dict):
        for key, default in GRID_DEFAULTS.items():
            value = grid.get(key)
            if isinstance(default, bool):
                if isinstance(value, bool):
                    cfg["GRID"][key] = value
            elif _positive_int(value):
                cfg["GRID"][key] = value

    messages = data.get("messages")
    if isinstance(messages, dict) and _positive_int(messages.get("max_items")):
        cfg["MESSAGES_MAX_ITEMS"] = messages["max_items"]

    return cfg
