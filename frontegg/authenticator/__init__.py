from frontegg.authenticator.access_token import AccessToken
from frontegg.authenticator.authenticator import Authenticator

__all__ = ["AccessToken", "Authenticator"]
