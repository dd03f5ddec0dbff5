"""Main entry point for the xor_tickler package."""
from xor_tickler.cli import main


if __name__ == "__main__":
    main()
