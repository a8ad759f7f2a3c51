# Services package init
"""
Wallit Users — Services Layer
==============================

What:  Business logic sitting between routes (HTTP) and the database.

Service Inventory:
    - UserService: registration, authentication and user lookups
"""
