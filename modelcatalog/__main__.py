"""
modelcatalog - AI model provider catalog

Quick Start:
    pip install -e .
    python -m modelcatalog providers
"""

from modelcatalog.cli.cli import main

if __name__ == "__main__":
    main()
