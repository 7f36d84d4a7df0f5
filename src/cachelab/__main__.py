"""Main entry point for the cachelab CLI.

Usage:
    python -m cachelab --help
    cachelab --help  # If installed via pip/uv
"""

from cachelab.cli import main

if __name__ == "__main__":
    main()
