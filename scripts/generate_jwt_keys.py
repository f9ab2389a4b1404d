#!/usr/bin/env python
"""
Generate the RSA key pair used to sign and verify JWTs.

Usage:
  python scripts/generate_jwt_keys.py                      # writes keys/private.pem, keys/public.pem
  python scripts/generate_jwt_keys.py --out-dir /etc/blob-gateway --bits 4096
"""

import os
import sys
import argparse

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def main():
    parser = argparse.ArgumentParser(description='Generate an RSA key pair for JWTs')
    parser.add_argument('--out-dir', default='keys', help='Output directory (default: keys)')
    parser.add_argument('--bits', type=int, default=2048, help='Key size (default: 2048)')
    parser.add_argument('--force', action='store_true', help='Overwrite existing keys')
    args = parser.parse_args()

    private_path = os.path.join(args.out_dir, 'private.pem')
    public_path = os.path.join(args.out_dir, 'public.pem')

    if not args.force and (os.path.exists(private_path) or os.path.exists(public_path)):
        print(f"Error: keys already exist in {args.out_dir} (use --force to overwrite)")
        sys.exit(1)

    os.makedirs(args.out_dir, exist_ok=True)

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=args.bits)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    with open(private_path, 'wb') as f:
        f.write(private_pem)
    os.chmod(private_path, 0o600)
    with open(public_path, 'wb') as f:
        f.write(public_pem)

    print(f"✓ Private key: {private_path}")
    print(f"✓ Public key: {public_path}")
    print("\nSet in .env:")
    print(f"  PRIVATE_KEY_PATH={private_path}")
    print(f"  PUBLIC_KEY_PATH={public_path}")


if __name__ == "__main__":
    main()
