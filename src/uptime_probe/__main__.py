import sys

from uptime_probe.cli import main

sys.exit(main())
