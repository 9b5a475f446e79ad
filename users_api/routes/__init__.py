# Routes package init
"""
Users API: Routes Package
===========================

Route Inventory:
    - users.py:   GET/POST /users, PUT/DELETE /users/{id}
    - health.py:  GET /health

Routes stay thin: read the request, make one service call, shape the
response. Failures surface as exceptions handled in main.py.
"""
