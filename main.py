# main.py

import sys

from rollscan.cli import main

if __name__ == "__main__":
    sys.exit(main())
