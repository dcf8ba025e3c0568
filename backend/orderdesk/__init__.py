"""
Dicompel order desk - data-access layer and order protocol
"""
__version__ = "1.0.0"
