"""Main entry point for humidi."""

from humidi.cli import cli

if __name__ == "__main__":
    cli()
