"""Configuration constants and re-exports for sitesleuth."""

from sitesleuth.config.loader import _get_config_dir, load_config

# --- Initialize Configuration ---
_CONFIG = load_config()

# --- Expose Constants ---

# General
_gen = _CONFIG["general"]
LOG_LEVEL = _gen.get("log_level", "INFO")
LOG_FILE = _gen.get("log_file", "~/.config/sitesleuth/logs/sitesleuth.log")
# 0 disables the timeout; generation calls then wait on the network layer.
REQUEST_TIMEOUT = _gen.get("request_timeout", 0) or None
USER_AGENT = _gen.get("user_agent", "sitesleuth/0.1")
RANKING_MODEL = _gen.get("ranking_model", "flash")
GROUNDED_MODEL = _gen.get("grounded_model", "flash-grounded")

# Models
MODELS = _CONFIG["models"]

# Ranking pipeline
_ranking = _CONFIG["ranking"]
HISTORY_LOOKBACK_DAYS = _ranking.get("lookback_days", 30)
MAX_HISTORY_RESULTS = _ranking.get("max_history_results", 1000)
FALLBACK_POOL_SIZE = _ranking.get("fallback_pool_size", 20)
AI_RANK_MAX_CANDIDATES = _ranking.get("ai_rank_max_candidates", 50)
TRUNCATE_CANDIDATES = _ranking.get("truncate_candidates", 35)
RANKING_PROMPT_WINDOW = _ranking.get("ranking_prompt_window", 30)
RANKING_MAX_RESULTS = _ranking.get("ranking_max_results", 20)
GROUNDED_PROMPT_WINDOW = _ranking.get("grounded_prompt_window", 20)
MAX_RESULTS = _ranking.get("max_results", 5)

CONFIG_DIR = _get_config_dir()
