"""Assessment data types and GitHub Actions workflow parsing for agentic-coding maturity checks."""

__version__ = "0.1.0"
__all__ = ["acmm", "workflows"]