"""python -m habitlog"""
import sys

from habitlog.cli import main

sys.exit(main())
