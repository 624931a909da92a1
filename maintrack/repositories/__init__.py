"""
Data access helpers.

Repositories only query and ``flush``; committing is the caller's job so that
a service can group several writes into one transaction.
"""
