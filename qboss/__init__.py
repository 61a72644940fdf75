"""
QBoss - a window manager companion for KDE Wayland

This package provides a CLI and GUI for listing, searching and controlling
KWin windows, monitoring window changes, and launching or toggling saved
applications by name.
"""

__version__ = "1.1.0"
__author__ = "QBoss Team"
