"""Allows running as: python -m coordnet.cli"""

import sys

from .main import main

sys.exit(main())
