"""
Worship center backend-for-frontend.

Scientists directory, guestbook and CMS content proxy behind one FastAPI
application. Entry point: worship_bff.main:app
"""
