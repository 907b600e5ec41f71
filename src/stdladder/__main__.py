import sys

from stdladder.cli import main

sys.exit(main())
