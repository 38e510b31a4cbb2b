"""
Main entry point for running the package directly:

    python -m phyfake
"""

from phyfake.web_app import main

if __name__ == "__main__":
    main()
