from dataclasses import dataclass
from typing import Dict, Optional
import asyncio
import logging

from websearch_relay.core.constants import ANTHROPIC, FAMILY_ORDER, OPENAI
from websearch_relay.core.provider_directory import ProviderDirectory
from websearch_relay.core.scanner import Credentials, ProviderResolution, ScanResult, scan
from websearch_relay.core.session_tracker import ActiveModel, ActiveModelTracker

logger = logging.getLogger(__name__)

# How a resolution was reached
REASON_LOCKED = "locked"
REASON_ACTIVE = "active"
REASON_FALLBACK = "fallback"


@dataclass
class ResolvedProvider:
    """Provider family, model and credentials chosen for one search"""
    family: str
    model_id: str
    credentials: Credentials
    reason: str = REASON_ACTIVE


def resolve(
    resolution_map: Dict[str, ProviderResolution],
    active_model: Optional[ActiveModel],
    active_model_family: Optional[str],
) -> Optional[ResolvedProvider]:
    """Pick the provider/model for a search.

    Priority: a model tagged "always" in family order, then the active model
    if its family has credentials, then a model tagged "auto" in family
    order. Returns None when nothing applies.
    """
    for family in FAMILY_ORDER:
        resolution = resolution_map.get(family)
        if resolution and resolution.locked_model:
            return ResolvedProvider(
                family=family,
                model_id=resolution.locked_model,
                credentials=resolution.credentials,
                reason=REASON_LOCKED,
            )

    # Family match alone is not enough, the family needs credentials
    if active_model and active_model_family in resolution_map:
        return ResolvedProvider(
            family=active_model_family,
            model_id=active_model.model_id,
            credentials=resolution_map[active_model_family].credentials,
            reason=REASON_ACTIVE,
        )

    for family in FAMILY_ORDER:
        resolution = resolution_map.get(family)
        if resolution and resolution.fallback_model:
            return ResolvedProvider(
                family=family,
                model_id=resolution.fallback_model,
                credentials=resolution.credentials,
                reason=REASON_FALLBACK,
            )

    return None


class ModelManager:
    """Resolves the provider for a session's search from the provider directory.

    The directory is scanned once, on the first search, and the result is kept
    for the rest of the process lifetime.
    """

    def __init__(self, directory: ProviderDirectory, tracker: ActiveModelTracker):
        self.directory = directory
        self.tracker = tracker
        self._scan: Optional[ScanResult] = None
        self._scan_lock: Optional[asyncio.Lock] = None

    async def get_scan(self) -> ScanResult:
        if self._scan is not None:
            return self._scan
        # Created on first use so it binds to the running event loop
        if self._scan_lock is None:
            self._scan_lock = asyncio.Lock()
        # Held across the directory query so concurrent first searches share one scan
        async with self._scan_lock:
            if self._scan is None:
                providers = await self.directory.list_providers()
                self._scan = scan(providers)
        return self._scan

    async def resolve_for_session(self, session_id: Optional[str]) -> Optional[ResolvedProvider]:
        scan_result = await self.get_scan()
        active = self.tracker.get(session_id)
        active_family = None
        if active:
            active_family = scan_result.family_of(active.model_id, active.provider_id)

        resolved = resolve(scan_result.resolutions, active, active_family)
        if resolved:
            logger.info(
                f"Resolved web search to {resolved.family}:{resolved.model_id} "
                f"({resolved.reason}) for session {session_id}"
            )
        else:
            logger.warning(f"No usable web search provider for session {session_id}")
        return resolved


FAMILY_DISPLAY_NAMES = {
    ANTHROPIC: "Anthropic",
    OPENAI: "OpenAI",
}

_CONFIG_EXAMPLE = """[[provider]]
id = "anthropic"
npm = "@ai-sdk/anthropic"

[provider.options]
apiKey = "{env:ANTHROPIC_API_KEY}"

[provider.models."claude-sonnet-4-5".options]
websearch = "auto"    # or "always" to use this model for every search"""


def format_config_error(scan_result: Optional[ScanResult] = None) -> str:
    """Corrective message for a configuration that cannot serve a search"""
    missing = list(scan_result.uncredentialed) if scan_result else []

    if missing:
        names = ", ".join(FAMILY_DISPLAY_NAMES.get(f, f) for f in missing)
        problem = (
            f"Error: web-search found {names} model(s) but no API key for them.\n\n"
            "A provider needs a `key` or an `options.apiKey` before its models can be used for search."
        )
    else:
        problem = (
            "Error: web-search requires an Anthropic or OpenAI provider with an API key, and either "
            "an active model from that provider or a model tagged with `websearch = \"auto\"` "
            "or `websearch = \"always\"`.\n\n"
            "No usable provider was found for the current model."
        )

    return f"""{problem}

To fix this, add a provider to your configuration and tag the model you want to use for web searches:

{_CONFIG_EXAMPLE}

Steps:
1. Make sure the provider has a valid API key (`key` or `options.apiKey`, `{{env:NAME}}` is supported)
2. Tag a model with `websearch = "auto"` (used when the active model cannot search) or `"always"` (used for every search)
3. Restart the relay to pick up the configuration change"""
