import sys

from paddycalc.app import main

sys.exit(main())
