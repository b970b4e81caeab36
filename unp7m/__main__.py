import sys

from unp7m.cli import main

sys.exit(main())
