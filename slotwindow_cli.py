#!/usr/bin/env python3
"""
Convenience entry point for running slotwindow directly.

Usage: python slotwindow_cli.py [command] [options]
"""

from slotwindow.cli.app import app

if __name__ == "__main__":
    app()
