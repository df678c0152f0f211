"""Command-line entry point and terminal prompts."""
