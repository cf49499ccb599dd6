"""Allow ``python -m stylebridge``."""

import sys

from .cli import main

sys.exit(main())
