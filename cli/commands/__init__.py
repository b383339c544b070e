from .books import books
from .requests import requests
from .catalog import catalog

__all__ = ['books', 'requests', 'catalog']
