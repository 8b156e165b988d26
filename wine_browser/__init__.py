"""
Top-level package for the wine reviews browser.

Most code should import from submodules such as:
    wine_browser.core
    wine_browser.views
    wine_browser.ui
"""

__version__ = "0.1.0"

__all__: list[str] = []
