"""
procwarden: launch an external process, keep its PID in a file, and stop it again.
"""

__version__ = "0.1.0"
