"""Module entrypoint for ``python -m todotree``."""

from .cli import main


if __name__ == "__main__":
    main()
