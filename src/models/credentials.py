"""
OAuth credential held for the lifetime of the process.
"""

from dataclasses import dataclass, field


@dataclass
class Credential:
    """Google OAuth client settings plus the current token set."""

    client_id: str
    client_secret: str
    redirect_uri: str
    access_token: str = ""
    refresh_token: str = ""
    scopes: list[str] = field(default_factory=list)
    token_type: str = "Bearer"
    expiry_date: int | None = None  # epoch milliseconds

    def has_tokens(self) -> bool:
        return bool(self.access_token or self.refresh_token)

    def token_set(self) -> dict:
        """Token fields in the shape returned to API callers."""
        return {
            "access_token": self.access_token or None,
            "refresh_token": self.refresh_token or None,
            "scope": " ".join(self.scopes),
            "token_type": self.token_type,
            "expiry_date": self.expiry_date,
        }
