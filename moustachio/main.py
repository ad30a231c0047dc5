# moustachio/main.py
"""Main entry point for the moustachio CLI application."""

from moustachio.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="moustachio")

if __name__ == '__main__':
    entrypoint()
