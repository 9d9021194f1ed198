"""Command implementations for the formrules CLI."""
