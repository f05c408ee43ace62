import sys

from leettui.cli import main

sys.exit(main())
