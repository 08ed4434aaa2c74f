"""Pydantic models for GitScrum MCP."""
