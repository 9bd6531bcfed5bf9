# Services package init
"""
Mini Notes Backend — Services Layer
=====================================

What:  Business logic between the route handlers and the key-value store.

Service Inventory:
    - PasswordHasher: bcrypt hashing with a fixed cost factor
    - SessionStore:   opaque bearer tokens resolved server-side
    - AuthService:    register / login / authenticate / logout
    - NoteService:    per-user note CRUD

Services are constructed once in create_app() with their storage namespace
injected, then handed to the route registration functions.
"""
