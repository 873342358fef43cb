"""
Plant Monitor Backend
=====================

This is the Python package for the backend API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a reading look like?)
- services/  = Workers (parse lines, keep state, write the history)
- routers/   = API endpoints (the doors into our app)
- utils/     = Input validation
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
