"""repoctl - APT repository and signing key management for derivative hosts."""

__version__ = "0.1.0"
