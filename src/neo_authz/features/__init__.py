"""Feature packages: resources, authorization and organizations."""
