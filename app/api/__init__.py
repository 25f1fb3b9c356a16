"""HTTP and realtime API routers"""
