"""
Provider directory scanner.

Walks the configured providers and their models in order and builds, per
provider family, the first usable credentials plus the first model tagged
``always`` (locked) and the first tagged ``auto`` (fallback). First seen
wins at every level, so results depend only on provider and model order.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from websearch_relay.core.constants import FAMILY_BY_NPM, TAG_ALWAYS, TAG_AUTO

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r"^\{env:(\w+)\}$")
_VERSION_SUFFIX_RE = re.compile(r"/v1/?$")


@dataclass(frozen=True)
class Credentials:
    api_key: str
    base_url: Optional[str] = None


@dataclass
class ProviderResolution:
    """Usable configuration for one provider family"""
    credentials: Credentials
    locked_model: Optional[str] = None      # first model tagged "always"
    fallback_model: Optional[str] = None    # first model tagged "auto"


@dataclass
class ScanResult:
    # family -> resolution, only for families with credentials
    resolutions: Dict[str, ProviderResolution] = field(default_factory=dict)
    # (provider_id, model_id) -> family, for every recognized model
    model_families: Dict[Tuple[Optional[str], str], str] = field(default_factory=dict)
    # recognized families that never yielded credentials
    uncredentialed: List[str] = field(default_factory=list)

    def family_of(self, model_id: Optional[str], provider_id: Optional[str] = None) -> Optional[str]:
        """Family of a model, by (provider, model) first and then by model id alone"""
        if not model_id:
            return None
        family = self.model_families.get((provider_id, model_id))
        if family:
            return family
        for (_, known_model_id), known_family in self.model_families.items():
            if known_model_id == model_id:
                return known_family
        return None


@dataclass
class _FamilyAccumulator:
    credentials: Optional[Credentials] = None
    locked_model: Optional[str] = None
    fallback_model: Optional[str] = None


def resolve_env_var(value: str) -> str:
    """Expand a ``{env:NAME}`` reference; unset variables expand to an empty string"""
    match = _ENV_VAR_RE.match(value)
    if match:
        return os.environ.get(match.group(1), "")
    return value


def normalize_base_url(url: str) -> str:
    """Strip a trailing /v1 so SDKs that append their own version path don't double it"""
    return _VERSION_SUFFIX_RE.sub("", url)


def _string_value(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = resolve_env_var(value).strip()
    return value or None


def extract_credentials(provider: Dict[str, Any]) -> Optional[Credentials]:
    """Credentials from the provider's direct ``key``, else from ``options.apiKey``"""
    options = provider.get("options")
    if not isinstance(options, dict):
        options = {}

    api_key = _string_value(provider.get("key")) or _string_value(options.get("apiKey"))
    if not api_key:
        return None

    base_url = _string_value(options.get("baseURL"))
    return Credentials(
        api_key=api_key,
        base_url=normalize_base_url(base_url) if base_url else None,
    )


def model_family(model: Dict[str, Any]) -> Optional[str]:
    """Family of a model from its API-shape identifier, never from the provider name"""
    api = model.get("api")
    if not isinstance(api, dict):
        return None
    npm = api.get("npm")
    if not isinstance(npm, str):
        return None
    return FAMILY_BY_NPM.get(npm)


def model_tag(model: Dict[str, Any]) -> Optional[str]:
    options = model.get("options")
    if not isinstance(options, dict):
        return None
    tag = options.get("websearch")
    # Legacy boolean flag pins the model the same way "always" does
    if tag is True:
        return TAG_ALWAYS
    if tag in (TAG_ALWAYS, TAG_AUTO):
        return tag
    return None


def _model_id(model_key: Any, model: Dict[str, Any]) -> Optional[str]:
    model_id = model.get("id")
    if isinstance(model_id, str) and model_id:
        return model_id
    if isinstance(model_key, str) and model_key:
        return model_key
    return None


def _iter_models(provider: Dict[str, Any]) -> Iterable[Tuple[Any, Any]]:
    models = provider.get("models")
    if isinstance(models, dict):
        return models.items()
    if isinstance(models, list):
        return ((None, m) for m in models)
    return ()


def scan(providers: Iterable[Any]) -> ScanResult:
    """Build the resolution map and model directory from provider entries"""
    accumulators: Dict[str, _FamilyAccumulator] = {}
    result = ScanResult()

    for provider in providers or ():
        if not isinstance(provider, dict):
            logger.debug(f"Skipping malformed provider entry: {provider!r}")
            continue

        provider_id = provider.get("id")
        if not isinstance(provider_id, str):
            provider_id = None

        for model_key, model in _iter_models(provider):
            if not isinstance(model, dict):
                continue
            model_id = _model_id(model_key, model)
            family = model_family(model)
            if model_id is None or family is None:
                continue

            result.model_families.setdefault((provider_id, model_id), family)
            acc = accumulators.setdefault(family, _FamilyAccumulator())

            if acc.credentials is None:
                acc.credentials = extract_credentials(provider)

            tag = model_tag(model)
            if tag == TAG_ALWAYS and acc.locked_model is None:
                acc.locked_model = model_id
            elif tag == TAG_AUTO and acc.fallback_model is None:
                acc.fallback_model = model_id

    for family, acc in accumulators.items():
        if acc.credentials is None:
            # A tag without credentials cannot be used
            logger.warning(f"No API key found for any '{family}' provider, ignoring its models")
            result.uncredentialed.append(family)
            continue
        result.resolutions[family] = ProviderResolution(
            credentials=acc.credentials,
            locked_model=acc.locked_model,
            fallback_model=acc.fallback_model,
        )

    logger.info(
        f"Provider scan complete: families={list(result.resolutions)}, "
        f"models={len(result.model_families)}"
    )
    return result
