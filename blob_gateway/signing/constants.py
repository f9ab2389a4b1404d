"""
Protocol constants for AWS Signature Version 4 request signing.
"""

# Algorithm identifier that opens the string-to-sign and the Authorization header
ALGORITHM_ID = "AWS4-HMAC-SHA256"

# Prepended to the raw secret key before the HMAC chain starts
SECRET_KEY_PREFIX = "AWS4"

# Last component of every credential scope
SCOPE_TERMINATOR = "aws4_request"

# Service identifier for S3-compatible object storage
S3_SERVICE = "s3"

# Headers the outbound transport attaches
AMZ_DATE_HEADER = "x-amz-date"
CONTENT_SHA256_HEADER = "x-amz-content-sha256"
AUTHORIZATION_HEADER = "Authorization"
HOST_HEADER = "host"

# YYYYMMDD'T'HHMMSS'Z'
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
SCOPE_DATE_FORMAT = "%Y%m%d"

# SHA-256 of the empty byte sequence
EMPTY_PAYLOAD_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
