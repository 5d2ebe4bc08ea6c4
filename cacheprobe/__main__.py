"""Allow `python -m cacheprobe`."""

import sys

from cacheprobe.main import main

sys.exit(main())
