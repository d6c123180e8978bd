"""
Team Chat API - workspace, member and channel access control
"""

__version__ = "1.0.0"
