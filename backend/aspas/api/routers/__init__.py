"""
REST routers, all mounted under /api by aspas.main.
"""
