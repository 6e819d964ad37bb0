#!/usr/bin/env python3
"""
Chan Structure Analysis - Main Entry Point

Usage:
    python main.py analyze data.csv
    python main.py analyze data.csv --strategy static --min-stroke-bars 4
    python main.py compare data.csv --json
"""

if __name__ == "__main__":
    import sys
    from src.cli.main import main
    sys.exit(main())
