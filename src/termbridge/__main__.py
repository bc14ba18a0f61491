from __future__ import annotations

from termbridge.cli import cli

if __name__ == "__main__":
    cli()
