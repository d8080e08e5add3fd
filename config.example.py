# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Connectors
    "TASKBOARD_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Local data
    "TASKBOARD_DATA_DIR": "Directory for the task document and logs (default: .local/taskboard).",
    "TASKBOARD_STORAGE_KEY": "Name of the persisted task document (default: text-storage).",
}
