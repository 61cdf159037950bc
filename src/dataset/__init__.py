"""Dataset manifest layer.

This package maps tracked dataset files to content hashes.
It answers which hash a file holds and which files hold a hash.
"""
