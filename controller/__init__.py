# /controller/__init__.py

"""
Telescope Controller Package

Central coordination package for the map application:
- Logging configuration and management
- Environment-driven configuration
- Background dataset loading
"""
