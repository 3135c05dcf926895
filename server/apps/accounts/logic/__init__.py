"""Business logic layer for accounts app.

Issues and verifies the bearer tokens that identify API users.
Passwords and user registration are handled by django.contrib.auth.
"""
