"""Core configuration, error types and orchestration for repoctl."""
