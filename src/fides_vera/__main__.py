import sys

from fides_vera.cli import main

sys.exit(main())
