"""agentbox — run a coding agent against your repository inside a locked-down container."""

__version__ = "1.0.0"
