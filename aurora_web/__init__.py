"""
HTTP transport for the Aurora support desk.

Routers (mounted by aurora_web.main.create_app):
- aurora_web.auth_routes.router    /auth/provider/callback
- aurora_web.data_routes.router    /api/data/{user_id}, /api/health
- aurora_web.order_routes.router   /api/orders
- aurora_web.ticket_routes.router  /api/tickets
- aurora_web.admin_routes.router   /api/admin
"""
