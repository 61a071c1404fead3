"""Allow running the CLI with ``python -m architect_cli``."""

from architect_cli.cli.main import run

if __name__ == "__main__":
    run()
