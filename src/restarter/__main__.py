"""Allow ``python -m restarter``."""

from restarter.cli import main

if __name__ == "__main__":
    main()
