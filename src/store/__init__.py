"""Blob storage layer.

This module persists immutable blobs in local or remote stores.
It powers blob transfer and integrity checks for the SDK.
"""
