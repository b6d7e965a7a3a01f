"""Entrypoint for `python -m TexPack`."""

from .cli import main

if __name__ == "__main__":
    main()
