# Routes package init
"""
Wallit Users — API Routes Package
==================================

Route Inventory:
    - users.py:   POST /users               (register)
                  POST /users/authenticate  (verify credentials)
                  GET  /users?email=...     (lookup by email)
    - health.py:  GET  /health              (service health check)

Routes stay thin: extract request data, call the service, shape the response.
"""
