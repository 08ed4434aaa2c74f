"""Core building blocks: HTTP client, authentication, identifier resolution."""
