"""
Routes Package - Blueprint Registration

This package organizes Flask routes into modular blueprints for better
code organization and maintainability.
"""

from .main import main_bp
from .admin_news import admin_news_bp

__all__ = ['main_bp', 'admin_news_bp']
