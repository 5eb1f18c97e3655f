"""Allow running as: python -m contactmap"""

import sys

from .cli import main

sys.exit(main())
