#!/usr/bin/env python3
"""superdriver - Entry point."""
from superdriver.cli.main import cli


if __name__ == "__main__":
    cli()
