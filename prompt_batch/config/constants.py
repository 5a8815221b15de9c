"""Constants for run configuration and file naming."""

DEFAULT_PROMPTS_DIR = "./prompts"
DEFAULT_OUTPUT_DIR = "./outputs"
DEFAULT_MODEL = "claude-2"
DEFAULT_PROMPT_KEY = "input"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_BASE = 2.0
DEFAULT_CHUNK_LINES = 0
DEFAULT_WORKERS = 1

PROMPT_FILE_EXTENSION = ".txt"
RESPONSE_FILE_SUFFIX = ".response.json"
CHUNK_NAME_INFIX = "_part"

# Key reserved for the model identifier in every request body
MODEL_KEY = "model"

COMPONENT_CLI = "cli"
COMPONENT_RUNNER = "runner"
COMPONENT_DISPATCH = "dispatch"
COMPONENT_CHUNKER = "chunker"
