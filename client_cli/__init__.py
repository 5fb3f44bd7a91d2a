"""Command-line entrypoint for the vCloud Director client."""
