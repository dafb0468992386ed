# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
Provider keys are also accepted without the STUDYFLOW_ prefix (e.g. GEMINI_API_KEY).
"""

ENV_VARS = {
    # App / logging
    "STUDYFLOW_APP_NAME": "App display name (default: studyflow).",
    "STUDYFLOW_LOG_LEVEL": "Logging level (default: INFO).",
    # Paths (gitignored)
    "STUDYFLOW_DATA_DIR": "Local data directory (default: .local/studyflow).",
    "STUDYFLOW_STORAGE_DB_PATH": "Key-value SQLite path (default: <data_dir>/storage.sqlite3).",
    # Chat relay
    "STUDYFLOW_RELAY_HOST": "Relay bind host for studyflow-relay (default: 127.0.0.1).",
    "STUDYFLOW_RELAY_PORT": "Relay bind port for studyflow-relay (default: 8000).",
    "STUDYFLOW_RELAY_URL": "Relay URL used by the console (empty => call the relay in-process).",
    "STUDYFLOW_RELAY_TIMEOUT_SECONDS": "Console -> relay request timeout (default: 60).",
    # Providers, first configured one wins
    "STUDYFLOW_GEMINI_API_KEY": "Google Gemini API key.",
    "STUDYFLOW_GEMINI_MODEL": "Gemini model (default: gemini-1.5-flash).",
    "STUDYFLOW_GEMINI_BASE_URL": "Gemini API base URL.",
    "STUDYFLOW_OPENAI_API_KEY": "OpenAI API key.",
    "STUDYFLOW_OPENAI_MODEL": "OpenAI model (default: gpt-4o-mini).",
    "STUDYFLOW_OPENROUTER_API_KEY": "OpenRouter API key.",
    "STUDYFLOW_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "STUDYFLOW_OPENROUTER_MODEL": "OpenRouter model.",
    "STUDYFLOW_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "STUDYFLOW_APP_TITLE": "Optional OpenRouter metadata header title.",
    "STUDYFLOW_HUGGINGFACE_API_KEY": "Hugging Face Inference API token.",
    "STUDYFLOW_HUGGINGFACE_MODEL": "Hugging Face model (default: mistralai/Mistral-7B-Instruct-v0.2).",
    "STUDYFLOW_HUGGINGFACE_BASE_URL": "Hugging Face Inference API base URL.",
    # Generation tuning
    "STUDYFLOW_LLM_TEMPERATURE": "Sampling temperature (default: 0.7).",
    "STUDYFLOW_LLM_MAX_OUTPUT_TOKENS": "Max generated tokens (default: 500).",
    "STUDYFLOW_LLM_CONNECT_TIMEOUT_SECONDS": "Provider connect timeout (default: 5).",
    "STUDYFLOW_LLM_READ_TIMEOUT_SECONDS": "Provider read timeout (default: 30).",
    # Focus timer
    "STUDYFLOW_FOCUS_MINUTES": "Focus session length (default: 25).",
    "STUDYFLOW_SHORT_BREAK_MINUTES": "Short break length (default: 5).",
    "STUDYFLOW_LONG_BREAK_MINUTES": "Long break length (default: 15).",
}
