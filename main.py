#!/usr/bin/env python3
"""
pokeduel entry point.

Thin wrapper around the command line front end so the simulator can be run
from a source checkout without installing it.

To run: python main.py simulate --user charmander --battles 3
"""
import sys

from pokeduel.cli import main

if __name__ == "__main__":
    sys.exit(main())
