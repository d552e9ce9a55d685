"""
slotwindow - booking-window rules for an at-home beauty-service storefront.
"""

__version__ = "0.1.0"
