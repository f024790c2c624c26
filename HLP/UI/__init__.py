"""
HLP UI Package
"""

from .app import LogsParserApp, run_app

__all__ = ['LogsParserApp', 'run_app']
