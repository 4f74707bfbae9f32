# -*- coding: utf-8 -*-

"""
Main entry point for running svg-inliner from a source checkout.
"""

import sys

from svg_inliner.cli import main

if __name__ == '__main__':
    sys.exit(main())
