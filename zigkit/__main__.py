"""
Entry point for running the zigkit CLI as a module.

Usage: python -m zigkit [command] [options]
"""

from zigkit.cli.parser import main

if __name__ == "__main__":
    main()
