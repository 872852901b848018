# /ui/__init__.py

"""
Telescope User Interface Package

PySide6 host around the map engine:
- Main window with the system search dock
- Map panes (one MapView per dataset) inside MapTabs
- Global error handler and error-handling decorators
"""
