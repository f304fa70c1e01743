"""
CLI runner module.

Provides commands:
- analyze: Analyze one text file
- batch: Analyze several text files
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
