"""Sample messages and handlers used by the discovery and builder tests."""
