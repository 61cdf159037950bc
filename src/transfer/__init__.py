"""Blob transfer layer.

This package runs validated, de-duplicated put/get batches
between dataset files and a blob store.
"""
