"""API routers, one per route group."""
