from typing import Optional
import argparse
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
import uvicorn

from websearch_relay import __version__
from websearch_relay.api.endpoints import router as api_router
from websearch_relay.api.web_search import WebSearchHandler
from websearch_relay.core.config import Config, init_config
from websearch_relay.core.logging import configure_logging
from websearch_relay.core.model_manager import ModelManager
from websearch_relay.core.provider_directory import (
    HttpProviderDirectory,
    ProviderDirectory,
    TomlProviderDirectory,
)
from websearch_relay.core.session_tracker import ActiveModelTracker, session_tracker


logger = logging.getLogger(__name__)


def build_directory(config: Config) -> ProviderDirectory:
    """Provider directory from config; the host is asked when directory_url is set"""
    if config.directory_url:
        return HttpProviderDirectory(config.directory_url, timeout=config.directory_timeout)
    if not config.config_file:
        raise ValueError("Either directory_url or a config file with [[provider]] entries is required")
    return TomlProviderDirectory(config.config_file)


def create_app(
    config: Config,
    directory: Optional[ProviderDirectory] = None,
    tracker: Optional[ActiveModelTracker] = None,
) -> FastAPI:
    if tracker is None:
        tracker = session_tracker
    if directory is None:
        directory = build_directory(config)

    app = FastAPI(title="WebSearch Relay", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The directory is only queried on the first search, never here
    app.state.session_tracker = tracker
    app.state.web_search_handler = WebSearchHandler(
        ModelManager(directory, tracker),
        output_format=config.output_format,
    )

    app.include_router(api_router)

    # request format error
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc):
        logger.warning(f"Invalid request to {request.url.path}: {exc}")
        return PlainTextResponse(f"Error: Invalid request: {exc}", status_code=400)

    return app


def main():
    parser = argparse.ArgumentParser(description=f"WebSearch Relay v{__version__}")
    parser.add_argument("--conf", help="Path to config toml file", required=True, type=str)
    parser.add_argument("--host", help="override host in config", required=False, type=str)
    parser.add_argument("--port", help="override port in config", required=False, type=int)
    parser.add_argument("--log", help="enable access_log", action="store_true", default=False)
    args = parser.parse_args()

    print(f"✅ Loading TOML config from: {args.conf}")
    try:
        config = init_config(config_file=args.conf)
    except (OSError, ValueError) as e:
        print(f"❌ Error: Could not load configuration: {e}")
        sys.exit(1)

    log_level = configure_logging(config.log_level)

    # Configuration summary
    print(f"🚀 WebSearch Relay v{__version__}")
    print("✅ Configuration loaded successfully")
    if config.directory_url:
        print(f"   Provider directory: {config.directory_url} (queried on first search)")
    else:
        print(f"   Provider directory: {config.config_file} ({config.provider_count()} providers, read on first search)")
    print(f"   Output format: {config.output_format}")
    print(f"   Server: {config.host}:{config.port}")
    print("")

    app = create_app(config)

    # Start server
    uvicorn.run(
        app,
        host=args.host or config.host,
        port=args.port or config.port,
        log_level=log_level.lower(),
        reload=False,
        access_log=args.log,
    )


if __name__ == "__main__":
    main()
