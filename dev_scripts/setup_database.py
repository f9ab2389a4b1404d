#!/usr/bin/env python
"""
Database setup script for the blob gateway.
Creates the blob_gateway database and user with proper permissions, then applies
blob_gateway/database/schema.sql

Usage:
  python dev_scripts/setup_database.py             # Sets up main 'blob_gateway' database
  python dev_scripts/setup_database.py --test-db   # Sets up test 'blob_gateway_test' database
"""

import os
import sys
import argparse
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from dotenv import load_dotenv


def _ensure_role_and_database(conn, db_name: str, db_user: str, db_password: str) -> None:
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1 FROM pg_roles WHERE rolname = %s", (db_user,))
        if cursor.fetchone():
            print(f"✓ User '{db_user}' already exists")
        else:
            cursor.execute(f"CREATE USER {db_user} WITH PASSWORD %s", (db_password,))
            print(f"✓ User '{db_user}' created")

        cursor.execute("SELECT 1 FROM pg_database WHERE datname = %s", (db_name,))
        if cursor.fetchone():
            print(f"✓ Database '{db_name}' already exists")
        else:
            cursor.execute(f"CREATE DATABASE {db_name} OWNER {db_user}")
            print(f"✓ Database '{db_name}' created")

        cursor.execute(f"GRANT ALL PRIVILEGES ON DATABASE {db_name} TO {db_user}")
        print(f"✓ Granted all privileges on '{db_name}' to '{db_user}'")


def main():
    """Setup blob_gateway database and user"""
    load_dotenv()

    parser = argparse.ArgumentParser(description='Setup the blob gateway database')
    parser.add_argument('--test-db', action='store_true',
                        help='Create blob_gateway_test instead of the main database')
    args = parser.parse_args()

    pg_host = os.environ.get('POSTGRES_HOST', 'localhost')
    pg_port = os.environ.get('POSTGRES_PORT', '5432')
    pg_user = os.environ.get('POSTGRES_USER', 'postgres')
    pg_password = os.environ.get('PG_PASSWORD')

    if args.test_db:
        db_name = 'blob_gateway_test'
    else:
        db_name = os.environ.get('BLOB_GATEWAY_PG_DB', 'blob_gateway')
    db_user = os.environ.get('BLOB_GATEWAY_PG_USER', 'blob_gateway')
    db_password = os.environ.get('BLOB_GATEWAY_PG_PASSWORD')

    if pg_password is None:
        print("Error: PG_PASSWORD environment variable is required")
        sys.exit(1)
    if db_password is None:
        print("Error: BLOB_GATEWAY_PG_PASSWORD environment variable is required")
        sys.exit(1)

    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    schema_path = os.path.join(repo_root, 'blob_gateway', 'database', 'schema.sql')
    if not os.path.exists(schema_path):
        print(f"Error: schema file not found at {schema_path}")
        sys.exit(1)

    print(f"Setting up database '{db_name}' and user '{db_user}' at {pg_host}:{pg_port}...")

    try:
        admin_conn = psycopg2.connect(
            host=pg_host, port=pg_port, database='postgres',
            user=pg_user, password=pg_password
        )
        admin_conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        _ensure_role_and_database(admin_conn, db_name, db_user, db_password)
        admin_conn.close()

        conn = psycopg2.connect(
            host=pg_host, port=pg_port, database=db_name,
            user=db_user, password=db_password
        )
        conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        with open(schema_path, 'r', encoding='utf-8') as f:
            schema_sql = f.read()
        with conn.cursor() as cursor:
            cursor.execute(schema_sql)
        conn.close()

        print("✓ Schema applied")
        print("✓ Database setup complete")

    except psycopg2.Error as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
