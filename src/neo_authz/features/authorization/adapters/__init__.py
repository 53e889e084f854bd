from .keycloak_uma_adapter import KeycloakUMAAdapter

__all__ = ["KeycloakUMAAdapter"]
