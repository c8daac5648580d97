import sys

from .cli.smorse_cli import main

sys.exit(main())
