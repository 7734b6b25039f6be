# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "STUDYHOUSE_APP_NAME": "App display name (default: Study House).",
    "STUDYHOUSE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Scheduling
    "STUDYHOUSE_SCHEDULING_MODE": "review (spaced repetition, default) or plan (date-range distribution).",
    # Paths (gitignored)
    "STUDYHOUSE_DATA_DIR": "Local data directory (default: .local/studyhouse).",
    "STUDYHOUSE_STATE_DB_PATH": "Key/value SQLite path (default: <data_dir>/state.sqlite3).",
    # Document extraction (OpenRouter / OpenAI-compatible)
    "STUDYHOUSE_OPENROUTER_API_KEY": "API key (required only for PDF extraction).",
    "STUDYHOUSE_OPENROUTER_BASE_URL": "Base URL (default: https://openrouter.ai/api/v1).",
    "STUDYHOUSE_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "STUDYHOUSE_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "STUDYHOUSE_APP_TITLE": "Optional OpenRouter metadata header title.",
    # Imports
    "STUDYHOUSE_IMPORT_TIMEOUT_SECONDS": "Upper bound for one extraction/crawl call (default: 60).",
    "STUDYHOUSE_CRAWL_DELAY_SECONDS": "Simulated folder crawl delay (default: 3).",
}
