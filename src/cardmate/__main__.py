"""
Main entry point for cardmate.
"""

import sys
from cardmate.cli import main

if __name__ == "__main__":
    sys.exit(main())
