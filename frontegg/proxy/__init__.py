from frontegg.proxy.adapter import FronteggAdapter, ProxyRequest
from frontegg.proxy.proxy import Proxy

__all__ = ["FronteggAdapter", "Proxy", "ProxyRequest"]
