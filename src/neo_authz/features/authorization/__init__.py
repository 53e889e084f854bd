"""Authorization feature: external service client, permission checks and self-healing."""
