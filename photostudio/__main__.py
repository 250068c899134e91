import sys

from .handlers.studio import main

sys.exit(main())
