"""
Package entry point.

Allows running the client via:

    python -m campusonline

This simply forwards execution to campusonline.cli.main().
"""

from campusonline.cli import main

if __name__ == "__main__":
    main()
