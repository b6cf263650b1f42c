"""
Response models returned by the service facade.
"""
