"""Keycloak UMA client configuration entity."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KeycloakUMAConfig:
    """Connection details for the realm's UMA Protection API and token endpoint."""

    server_url: str
    realm_name: str
    client_id: str
    client_secret: Optional[str] = None
    verify: bool = True
    timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration and normalize the server URL."""
        if not self.server_url:
            raise ValueError("server_url is required")

        if not self.realm_name:
            raise ValueError("realm_name is required")

        if not self.client_id:
            raise ValueError("client_id is required")

        # Keycloak v18+ no longer serves under /auth
        server_url = self.server_url.rstrip("/")
        if server_url.endswith("/auth"):
            server_url = server_url[:-5]
        object.__setattr__(self, "server_url", server_url)

    @property
    def realm_url(self) -> str:
        return f"{self.server_url}/realms/{self.realm_name}"

    @property
    def token_url(self) -> str:
        """Token endpoint, also used for UMA decision requests."""
        return f"{self.realm_url}/protocol/openid-connect/token"
