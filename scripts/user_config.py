"""datafilter user configuration.

Settings here override the built-in defaults; command-line options
override both.

Usage:
    datafilter "percent" value.json --config scripts/user_config.py
    datafilter '{"id": "int", "tags": {"type": "list", "contract": "tag"}}' - --config scripts/user_config.py --strict
"""

CONFIG = {
    # ========================================================================
    # COERCION MODE
    # ========================================================================
    "STRICT": False,          # True: refuse values needing conversion
    "MAX_DEPTH": 64,          # Maximum nesting of contracts

    # ========================================================================
    # APPLICATION TYPES
    # ========================================================================
    "ALIASES": {
        "percent": "int; min: 0; max: 100",
        "tag": "slug; maxLen: 32",
        "coordinates": {"type": "assoc", "keys": {"lat": "float; min: -90; max: 90", "lon": "float; min: -180; max: 180"}},
    },

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": "WARNING",
}
