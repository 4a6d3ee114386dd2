"""
S3 operations used by the bucket and file endpoints.

Each function takes an optional boto3 S3 client so callers (routers, the CLI,
tests) decide which endpoint it talks to.
"""
