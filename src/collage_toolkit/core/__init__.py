"""
Core Package

Data models shared by the collage and document composers.
"""
