"""sitesleuth - find pages in your browsing history with natural-language queries."""

__version__ = "0.1.0"


def main() -> None:
    """Run the CLI entry point with lazy import."""
    import sys

    from sitesleuth.cli.main import main as cli_main

    sys.exit(cli_main())


__all__ = ["main", "__version__"]
