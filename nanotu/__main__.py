import sys

from nanotu.main import main

sys.exit(main())
