import sys

from tadoku_stats.cli import main

sys.exit(main())
