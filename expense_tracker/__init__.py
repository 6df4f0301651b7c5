"""
Expense Tracker

A small personal-finance backend: users register and log in, then create,
list, update and delete their own expense records stored in MongoDB.
"""

__version__ = "1.0.0"
