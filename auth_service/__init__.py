"""
Natours Auth Service

FastAPI application for signup, login, password lifecycle and the current
user's account.
"""
