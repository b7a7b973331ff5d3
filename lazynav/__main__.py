"""Module entrypoint for ``python -m lazynav``.

All argument parsing and session setup happen in ``lazynav.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
