"""HTTP API for TaskKeeper.

- auth: top-level /auth routes (register, login, me)
- v1: /api/v1 resources, all behind the access guard
- validation: boundary validation helpers used by every endpoint
"""
