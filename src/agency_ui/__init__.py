"""Agency UI - interactive Next.js project scaffolder."""

__version__ = "1.0.0"
