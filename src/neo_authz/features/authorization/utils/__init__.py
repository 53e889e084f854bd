from .error_classification import (
    is_access_denied,
    is_invalid_resource_message,
    is_invalid_scope_error,
    is_invalid_scope_message,
)

__all__ = [
    "is_access_denied",
    "is_invalid_resource_message",
    "is_invalid_scope_error",
    "is_invalid_scope_message",
]
