"""Allow ``python -m booklib``."""

import sys

from booklib.cli import main

sys.exit(main())
