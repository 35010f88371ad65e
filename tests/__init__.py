"""
Test suite for the htmlquill package.
"""
