import sys

from snipman.main import main

sys.exit(main())
