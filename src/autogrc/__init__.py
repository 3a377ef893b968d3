"""AutoGRC compliance scoring engine."""

__version__ = "1.2.0"
