"""
Unit tests for scoped signing-key derivation.
"""
from blob_gateway.signing import Credentials, Scope, derive_signing_key


class TestDeriveSigningKey:
    """Test the HMAC chain over date, region, service and terminator."""

    def test_key_length(self, credentials, fixed_timestamp):
        key = derive_signing_key(credentials, Scope.from_timestamp(fixed_timestamp, 'us-east-1'))

        assert isinstance(key, bytes)
        assert len(key) == 32

    def test_aws_documentation_example(self):
        """Test against the derivation example in the AWS SigV4 documentation."""
        creds = Credentials('AKIDEXAMPLE', 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY')
        scope = Scope(date='20120215', region='us-east-1', service='iam')

        key = derive_signing_key(creds, scope)

        assert key.hex() == 'f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d'

    def test_deterministic(self, credentials):
        scope = Scope(date='20240101', region='eu-west-1')

        assert derive_signing_key(credentials, scope) == derive_signing_key(credentials, scope)

    def test_sensitive_to_each_scope_part(self, credentials):
        base = derive_signing_key(credentials, Scope(date='20240101', region='eu-west-1'))

        assert derive_signing_key(credentials, Scope(date='20240102', region='eu-west-1')) != base
        assert derive_signing_key(credentials, Scope(date='20240101', region='eu-west-2')) != base
        assert derive_signing_key(
            credentials, Scope(date='20240101', region='eu-west-1', service='iam')
        ) != base

    def test_sensitive_to_secret(self, credentials):
        scope = Scope(date='20240101', region='eu-west-1')
        other = Credentials(credentials.access_key, credentials.secret_key + 'x')

        assert derive_signing_key(credentials, scope) != derive_signing_key(other, scope)
