#!/usr/bin/env python3
"""
Rootless Setup module entry point
Allows running: python3 -m rootless
"""

from rootless.cli import main

if __name__ == '__main__':
    main()
