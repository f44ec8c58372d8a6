"""
Test suite for the quillpress project.
"""
