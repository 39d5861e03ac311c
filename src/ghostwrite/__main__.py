"""``python -m ghostwrite``"""

import sys

from ghostwrite.cli import main

if __name__ == "__main__":
    sys.exit(main())
