# edutrack/__main__.py
# Entry point for ``python -m edutrack``; the same click group as the ``edutrack`` console script.
from .cli import main

if __name__ == "__main__":
    main()
