"""Token adapters - Bearer token signing."""

from .jwt_issuer import JwtTokenIssuer

__all__ = ["JwtTokenIssuer"]
