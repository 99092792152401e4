"""Dotfiles bootstrap (Python-first, probe-driven).

Core design goals:
- Probe before acting; every step is idempotent
- Re-running after a failure resumes safely
- Native package manager first, direct download last
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
