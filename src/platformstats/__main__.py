import sys

from platformstats.cli import main

sys.exit(main())
