"""RPi temperature monitoring entrypoint.

Usage: python -m rpimon {serve,check} ...
"""

import sys

from rpimon.cli import main

if __name__ == "__main__":
    sys.exit(main())
