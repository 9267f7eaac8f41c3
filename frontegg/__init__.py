"""
Client library for the Frontegg vendor API.

Authenticates with client credentials, reads and writes audit logs,
triggers events and proxies inbound requests to the vendor API.
"""

from frontegg.client import Frontegg
from frontegg.config import Config

__version__ = Frontegg.VERSION

__all__ = ["Config", "Frontegg", "__version__"]
