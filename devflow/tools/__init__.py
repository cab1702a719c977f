"""MCP tools exposing the workflow service."""
