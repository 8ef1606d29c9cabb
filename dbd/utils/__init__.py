"""Utility functions and classes for dbd."""

from dbd.utils import logging

__all__ = ("logging",)
