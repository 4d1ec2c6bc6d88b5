"""Allow `python -m toolpick`."""

from toolpick.cli import main

main()
