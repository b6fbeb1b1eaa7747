"""
HTTP layer: FastAPI dependencies and one router per resource.
"""
