import os
from typing import Any, Dict, List, Optional

import toml

VALID_OUTPUT_FORMATS = ["markdown", "json"]


# Configuration
class Config:
    host: str = "0.0.0.0"
    port: int = 8090
    log_level: str = "INFO"

    # "markdown" or "json"
    output_format: str = "markdown"

    # When set, providers are fetched from the host instead of the config file
    directory_url: Optional[str] = None
    directory_timeout: int = 30

    config_file: Optional[str] = None
    config: Dict[str, Any]
    provider: List[Dict[str, Any]]

    def __init__(self):
        self.config = {}
        self.provider = []

    def init_toml(self):
        for k, v in self.config.items():
            print(f"set config.{k}={v}")
            if k in ["port", "directory_timeout"]:
                setattr(self, k, int(v))
            else:
                setattr(self, k, v)
        self._normalize_output_format()

    def _normalize_output_format(self):
        output_format = str(self.output_format).strip().lower()
        if output_format not in VALID_OUTPUT_FORMATS:
            print(f"⚠️  Warning: Unknown output_format '{self.output_format}', using 'markdown'")
            output_format = "markdown"
        self.output_format = output_format

    def provider_count(self) -> int:
        """Number of [[provider]] entries present at load time (informational only)"""
        return len(self.provider or [])


def init_config(config_file: str) -> Config:
    """Load a Config from a TOML file"""

    if not config_file:
        raise ValueError("TOML configuration file is required")

    print(f"load toml config from {config_file}")
    with open(config_file, "r") as f:
        data = toml.load(f)
    config = Config()
    config.config_file = os.path.abspath(config_file)
    config.config = data.get("config", {})
    config.provider = data.get("provider", [])
    config.init_toml()
    print(f" Configuration loaded: output_format={config.output_format}")
    return config
