"""
Project-wide constants for GhostWrite
"""

# ==============================================================================
# Remote Service
# ==============================================================================

DEFAULT_API_ENDPOINT = "https://api.ghostwrite.app/api"
STATUS_PATH = "/status"
NETWORK_TIMEOUT = 30.0  # seconds
IDEMPOTENCY_HEADER = "Idempotency-Key"

# Credits debited per successful AI transform
CREDITS_PER_TRANSFORM = 1
# Credits granted to a newly created trial account
TRIAL_CREDITS = 100

# ==============================================================================
# Capability Polling and Alerts
# ==============================================================================

RECHECK_INTERVAL = 5 * 60  # seconds
LOW_CREDIT_THRESHOLD = 10
UPGRADE_URL = "https://ghostwrite.app/signup"

# ==============================================================================
# Local Storage
# ==============================================================================

CREDENTIAL_STORAGE_KEY = "apiKey"
DEFAULT_CREDENTIAL_FILE = "~/.local/share/ghostwrite/credentials.json"

# ==============================================================================
# Providers
# ==============================================================================

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 2048
GEMINI_TOP_P = 0.95
GEMINI_TOP_K = 40

# Gemini pricing per 1K characters (USD), used for cost estimates only
GEMINI_INPUT_COST_PER_1K_CHARS = 0.00025
GEMINI_OUTPUT_COST_PER_1K_CHARS = 0.0005

# ==============================================================================
# Grammar Engine
# ==============================================================================

DEFAULT_GRAMMAR_MODULE = "ghostwrite.grammar.rules:RuleBasedGrammarEngine"
GRAMMAR_PLUGIN_FACTORY = "create_engine"

# ==============================================================================
# Connectivity Probe
# ==============================================================================

CONNECTIVITY_HOST = "1.1.1.1"
CONNECTIVITY_PORT = 53
CONNECTIVITY_TIMEOUT = 3.0  # seconds
