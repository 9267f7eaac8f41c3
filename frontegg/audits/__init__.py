from frontegg.audits.client import AuditsClient

__all__ = ["AuditsClient"]
