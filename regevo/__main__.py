import sys

from regevo.entrypoint.cli import main

sys.exit(main())
