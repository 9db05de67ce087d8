#!/usr/bin/env python3
"""
Entry point for the scheduled stats update workflow.
"""

import os
import sys

# Add the project directory to the Python path
sys.path.insert(0, os.path.dirname(__file__))

from repo_stats.app import main

if __name__ == "__main__":
    sys.exit(main())
