"""Source-checkout entry point: ``python run_cli.py readiness input.json``."""

from cli.cli import app

if __name__ == "__main__":
    app()
