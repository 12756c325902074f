#!/usr/bin/env python3
"""
run.py - Main entry point for the tictactoe game

Examples:
    python run.py play --size 4 --difficulty hard
    python run.py watch --x-difficulty easy --o-difficulty hard --rounds 5
    python run.py analyze --position XX__O____
    python run.py benchmark --iterations 5000
"""

import os
import sys

# Add the project root to Python path so the package imports without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tictactoe.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
