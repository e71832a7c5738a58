# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory (default: .local/taskflow).",
    "TASKFLOW_TASKS_DB_PATH": "Task SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TASKFLOW_PREFERENCES_PATH": "Sort order / hide-completed JSON (default: <data_dir>/preferences.json).",
    "TASKFLOW_SAVED_STATE_PATH": "Per-screen saved state JSON (default: <data_dir>/saved_state.json).",
    # Behaviour
    "TASKFLOW_SEED_SAMPLE_TASKS": "Insert sample tasks when the database is first created (default: true).",
    "TASKFLOW_SEARCH_CASE_SENSITIVE": "Case-sensitive name search (default: true).",
}
