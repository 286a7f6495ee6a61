"""
Registration module - Phone lookup and user creation steps of student registration.
"""
