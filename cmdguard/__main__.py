"""
Main entry point for running cmdguard as a module.

This allows the package to be executed directly with:
python -m cmdguard
"""

from cmdguard.main import app


def main() -> None:
    """Run the cmdguard CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
