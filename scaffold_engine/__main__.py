import sys

from scaffold_engine.cli import main

sys.exit(main())
