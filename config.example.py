# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKLINE_APP_NAME": "App display name (default: taskline).",
    "TASKLINE_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKLINE_DATA_DIR": "Local data directory (default: .local/taskline).",
    "TASKLINE_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TASKLINE_LOG_DIR": "Directory for taskline.log (default: <data_dir>).",
    # Search tuning
    "TASKLINE_SEARCH_THRESHOLD": "Fuzzy match threshold, 0 = exact only .. 1 = anything (default: 0.4).",
    "TASKLINE_SEARCH_MIN_QUERY_LENGTH": "Shorter queries return every task unfiltered (default: 2).",
}
