# Routes package init
"""
Campus Roster Backend — API Routes Package
===========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory (collection routes sit under API_PREFIX, default /api):
    - students.py:  GET    {prefix}/student
                    POST   {prefix}/addstudent
                    DELETE {prefix}/student/{id}
    - teachers.py:  GET    {prefix}/teacher
                    POST   {prefix}/addteacher
                    DELETE {prefix}/teacher/{id}
    - landing.py:   GET    /
    - health.py:    GET    /healthz, GET /readyz

Routes are thin: they parse input, call a service, and return its result.
"""
