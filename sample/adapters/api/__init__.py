"""HTTP adapter: routers, request scoping and the error boundary."""
