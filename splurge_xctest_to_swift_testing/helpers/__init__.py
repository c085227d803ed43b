"""Small filesystem helpers shared by the orchestrator and the CLI."""
