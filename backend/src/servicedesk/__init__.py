"""ServiceDesk backend - order lifecycle for a services marketplace"""

__version__ = "0.1.0"
