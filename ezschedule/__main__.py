"""
Package entry point.

Allows running the application via:

    python -m ezschedule

This simply forwards execution to ezschedule.cli.main().
"""

from ezschedule.cli import main

if __name__ == "__main__":
    main()
