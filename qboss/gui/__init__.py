"""
GUI package for QBoss.

This package provides the interactive graphical interface.
"""

from qboss.gui.main_window import MainWindow
