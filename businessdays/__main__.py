"""
Entry point for ``python -m businessdays``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
