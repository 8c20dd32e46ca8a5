import sys

from godo.cli import main

sys.exit(main())
