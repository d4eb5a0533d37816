"""
Entry point for ``python -m jabuti``.
"""

from jabuti.cli import main

if __name__ == "__main__":
    main()
