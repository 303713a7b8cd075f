"""``python -m golow`` entry point."""

from golow.cli import main

main()
