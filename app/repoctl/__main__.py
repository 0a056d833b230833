"""Allow running repoctl as ``python -m repoctl``."""

from repoctl.cli.main import app

if __name__ == "__main__":
    app()
