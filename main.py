#!/usr/bin/env python3
"""
Warehouse Access - Main Entry Point
===================================

Users, roles and activity log of the logistics warehouse management
system.

Usage:
    python main.py --help                   # Show available commands
    python main.py init                     # Create the data files
    python main.py setup-admin -u Admin     # Register the first administrator
    python main.py login -u Admin           # Log in
    python main.py users list               # List users
    python main.py test access ...          # Test access decisions
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from warehouse_access.cli.main import app

if __name__ == "__main__":
    app()
