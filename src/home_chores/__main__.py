"""Allow running with ``python -m home_chores``."""

from home_chores.app import main

main()
