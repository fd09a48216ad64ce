"""Event registration service - shared utilities"""
