"""CLI package for BookShare"""
from .main import cli

__all__ = ['cli']
