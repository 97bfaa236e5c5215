# Family identifiers
ANTHROPIC = "anthropic"
OPENAI = "openai"

# Fixed, deterministic family order used by the resolution policy
FAMILY_ORDER = (ANTHROPIC, OPENAI)

# API-shape identifiers (npm package of the SDK a model is served through)
FAMILY_BY_NPM = {
    "@ai-sdk/anthropic": ANTHROPIC,
    "@ai-sdk/openai": OPENAI,
}

# Per-model websearch tags
TAG_ALWAYS = "always"
TAG_AUTO = "auto"

DEFAULT_SEARCH_USES = 5
MIN_SEARCH_USES = 1
MAX_SEARCH_USES = 10
MIN_QUERY_LENGTH = 2
MAX_RESPONSE_TOKENS = 16_000

TOOL_NAME = "web-search"

SEARCH_SYSTEM_PROMPT = (
    "You are a web search assistant. Search the web for the user's query and "
    "answer concisely using the search results. Cite every source you rely on."
)
