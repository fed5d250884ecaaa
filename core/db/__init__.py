"""
Core Database Components

Reusable abstract models and database exceptions shared by the master and
tenant apps.
"""
