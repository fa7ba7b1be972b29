import sys

from rawline.cli import main

sys.exit(main())
