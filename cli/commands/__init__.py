"""
xcpv CLI Commands Package
"""

__all__ = ['validate', 'config']
