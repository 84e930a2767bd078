"""Domain services behind the HTTP blueprints.

Routes stay thin: they parse the request, call into a service, and turn the
result (or the raised ``ApiError``) into JSON.
"""
