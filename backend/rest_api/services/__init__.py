"""
Services module for business logic.

- domain/: Application services (orders, catalog, tables, users, stats)
- permissions/: Strategy pattern for role-based access control

Usage:
    from rest_api.services.domain import OrderService
    service = OrderService(db)
    orders = service.list_orders(identity, branch_id=branch_id)
"""
