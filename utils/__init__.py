"""
Utilities Package

Logging setup and the error taxonomy shared by the services and routes.
"""
