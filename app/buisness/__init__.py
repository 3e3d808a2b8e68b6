"""
Domain layer for the asset request system.
Contains the request workflow, the ledgers it coordinates and their policies,
separated from data persistence and HTTP concerns.
"""
