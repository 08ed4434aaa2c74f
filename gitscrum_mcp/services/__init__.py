"""Services wrapping the GitScrum REST endpoints."""
