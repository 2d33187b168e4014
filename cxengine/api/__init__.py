"""CX Engine REST API."""
