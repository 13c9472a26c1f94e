"""prebuild - pre-compilation orchestrator for the browser shell crate."""

__version__ = "0.1.0"
