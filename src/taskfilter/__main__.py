"""Allow running taskfilter with ``python -m taskfilter``."""

from taskfilter.cli import main


if __name__ == "__main__":
    main()
