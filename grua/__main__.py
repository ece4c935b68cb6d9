"""Module entrypoint for ``python -m grua``."""

from .cli import main


if __name__ == "__main__":
    main()
