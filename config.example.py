# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "SCHEDULER_APP_NAME": "App display name (default: scheduler).",
    "SCHEDULER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "SCHEDULER_DATA_DIR": "Local data directory holding scheduler.log (default: .local/scheduler).",
    "SCHEDULER_DB_FILE": "SQLite database file (default: scheduler.db). Created if missing.",
    "TODO_DBFILE": "Legacy name for SCHEDULER_DB_FILE, used when the new name is unset.",
    # Store tuning
    "SCHEDULER_LIST_LIMIT": "Max rows returned by /list, /search and /date (default: 20).",
}
