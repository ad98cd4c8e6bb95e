# file analyzer: ask grounded questions about an uploaded pdf and export the session
__version__ = "1.0.0"
