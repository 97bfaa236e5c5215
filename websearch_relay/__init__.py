"""WebSearch Relay

Resolves which configured AI provider runs a web search tool call and
normalizes the provider's answer into a uniform result.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv(encoding='utf8')


__version__ = "1.0.0"
__author__ = "WebSearch Relay"
