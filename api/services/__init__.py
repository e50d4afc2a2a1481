"""Service layer for business logic.

Layer hierarchy:
    Routes (HTTP) -> Services (Business Logic) -> Repositories (Database)

Services should:
- Contain all business rules and validation
- Receive their repositories and sibling services through __init__
- Raise the exceptions in services.exceptions on rule violations

Services should NOT:
- Directly execute SQL queries (use repositories)
- Know about HTTP request/response details
- Commit transactions (the request-scoped session does)
"""
