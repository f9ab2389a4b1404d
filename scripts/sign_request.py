#!/usr/bin/env python
"""
Print AWS Signature Version 4 headers for an object-storage request.

Useful for checking signatures against another client or curl.

Usage:
  python scripts/sign_request.py GET /bucket/key --host s3.amazonaws.com --region us-east-1
  python scripts/sign_request.py PUT /bucket/key --host localhost:9000 --body-file blob.bin

Credentials are read from S3_ACCESS_KEY and S3_SECRET_KEY (or --access-key/--secret-key).
"""

import os
import sys
import argparse
from datetime import datetime, timezone
from dotenv import load_dotenv

from blob_gateway.signing import Credentials, RequestSigner, SigningError
from blob_gateway.signing.constants import AMZ_DATE_FORMAT, HOST_HEADER


def parse_timestamp(value: str) -> datetime:
    """Parse a YYYYMMDDTHHMMSSZ timestamp."""
    return datetime.strptime(value, AMZ_DATE_FORMAT).replace(tzinfo=timezone.utc)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description='Print SigV4 headers for a request')
    parser.add_argument('method', choices=['GET', 'PUT'], help='HTTP method')
    parser.add_argument('uri', help='Percent-encoded request path, e.g. /bucket/key')
    parser.add_argument('--host', required=True, help='Host header value')
    parser.add_argument('--region', default=os.environ.get('S3_REGION', 'us-east-1'))
    parser.add_argument('--access-key', default=os.environ.get('S3_ACCESS_KEY'))
    parser.add_argument('--secret-key', default=os.environ.get('S3_SECRET_KEY'))
    parser.add_argument('--query', default='', help='Canonical query string')
    parser.add_argument('--body-file', help='File with the PUT body')
    parser.add_argument('--timestamp', type=parse_timestamp,
                        help='Signing time as YYYYMMDDTHHMMSSZ (default: now)')
    args = parser.parse_args()

    if not args.access_key or not args.secret_key:
        print("Error: access key and secret key are required")
        sys.exit(1)

    timestamp = args.timestamp or datetime.now(timezone.utc)
    signer = RequestSigner(Credentials(args.access_key, args.secret_key), region=args.region)
    headers = {HOST_HEADER: args.host}

    try:
        if args.method == 'PUT':
            body = b''
            if args.body_file:
                with open(args.body_file, 'rb') as f:
                    body = f.read()
            signed = signer.sign_put(args.uri, headers, body, timestamp, args.query)
        else:
            signed = signer.sign_get(args.uri, headers, timestamp, args.query)
    except (SigningError, ValueError) as e:
        print(f"Error signing request: {e}")
        sys.exit(1)

    print(f"Host: {args.host}")
    for name, value in signed.to_headers().items():
        print(f"{name}: {value}")
    print(f"\n✓ Signature: {signed.signature}")
    print(f"  Scope: {signed.scope}")


if __name__ == "__main__":
    main()
