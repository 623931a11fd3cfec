import sys

from pandabot.bot import main

sys.exit(main())
