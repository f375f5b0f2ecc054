"""Main function for activitypy."""

from activitypy.core import cli


def run_main() -> None:
    """Main entry point to activitypy."""
    cli.app()


if __name__ == "__main__":
    cli.app()
