"""Module entrypoint for ``python -m fileexplorer``."""

from .cli import main


if __name__ == "__main__":
    main()
