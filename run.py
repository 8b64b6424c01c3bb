#!/usr/bin/env python3
"""
Convenience wrapper to run wglan.

Usage: sudo python3 run.py

Or use the module directly:
    sudo python3 -m wglan
"""

import sys

from wglan.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
