"""Main entry point for running techlist as a module."""

from .cli import main

if __name__ == "__main__":
    main()
