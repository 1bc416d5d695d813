"""
Notekeeper.

- backend/: Notes API, JSON file store, view projection, configuration
"""
