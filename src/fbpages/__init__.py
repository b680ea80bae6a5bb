"""fbpages - Facebook Pages tools over the Model Context Protocol."""

__version__ = "1.0.0"
