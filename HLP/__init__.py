"""
HLP - Heroku Logs Parser

Terminal viewer for Heroku router/app log streams: parse, retain, filter
and browse log lines from `heroku logs --tail`, a saved file or a pipe.
"""

__version__ = "0.1.0"
