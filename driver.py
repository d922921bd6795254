"""
Build, write and search an inverted index from text files or a web crawl.

Usage:
    python driver.py -path input/ -index index.json -counts counts.json \
        -query queries.txt -results results.json [-exact] [-threads 5]
    python driver.py -url https://example.com/ -limit 50 -index index.json

See search_engine/driver.py for the full list of flags.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from search_engine.driver import main


if __name__ == "__main__":
    sys.exit(main())
