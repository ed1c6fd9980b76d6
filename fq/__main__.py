"""
fq main entry point for module execution.

Module: fq/__main__.py

Usage:
    python -m fq '*.txt' jq .
"""

from .cli import main

if __name__ == "__main__":
    main()
