"""Allow running the CLI as ``python -m scriptboard.cli``."""

from scriptboard.cli.main import main

if __name__ == "__main__":
    main()
