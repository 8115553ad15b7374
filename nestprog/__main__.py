"""
Entry point for running NESTPROG as a module.

Usage: python -m nestprog [command] [options]
"""
from .cli import main

if __name__ == "__main__":
    main()
