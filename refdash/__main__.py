"""Allow ``python -m refdash``."""

from refdash.cli import main

if __name__ == "__main__":
    main()
