import sys

from chms_cache.cli import main

sys.exit(main())
