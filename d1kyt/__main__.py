import sys

from d1kyt.cli import main

sys.exit(main())
