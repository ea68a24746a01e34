__version__ = "1.0.0"
__description__ = "Read-only web viewer for DocBase exports"
