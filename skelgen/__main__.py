"""Allow ``python -m skelgen``."""

import sys

from skelgen.pipeline import main

sys.exit(main())
