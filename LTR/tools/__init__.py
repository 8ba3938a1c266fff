"""
LTR Tools
=========
Command line tools built on the LTR reporters.
"""
