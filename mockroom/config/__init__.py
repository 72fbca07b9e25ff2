"""
Configuration for MockRoom
"""
