"""CLI package for Insight Shelf"""
from .main import cli

__all__ = ['cli']
