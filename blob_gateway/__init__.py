"""
Blob storage gateway with AWS Signature Version 4 signing for object storage.
"""
__version__ = '0.1.0'
