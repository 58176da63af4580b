"""Allow running as ``python -m hourglow``."""

from hourglow.cli import app

if __name__ == "__main__":
    app()
