"""
Sift Module Entry Point
========================

Allows running the Sift CLI via: python -m sift
"""

from sift.cli import main

if __name__ == "__main__":
    main()
