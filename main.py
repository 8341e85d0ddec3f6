#!/usr/bin/env python
import sys

from paddycalc.app import main

if __name__ == "__main__":
    sys.exit(main())
