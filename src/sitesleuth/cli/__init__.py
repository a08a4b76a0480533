"""Command-line front end for sitesleuth."""
