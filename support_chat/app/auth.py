from __future__ import annotations

from typing import Protocol


class CredentialValidator(Protocol):
    """
    Resolves a bearer token to the owner id it was issued for.
    Implementations raise CredentialError for invalid or expired tokens.
    """

    def validate(self, token: str) -> str:
        ...
