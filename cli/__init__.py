"""CLI package for the lending engine"""
from .main import cli

__all__ = ['cli']
