from jose import jwt

from clinic_api.core.security import TokenState, UserRole
from clinic_api.services.token_service import TokenService

SECRET = "unit-test-secret"

class TestTokenService:

    def test_issue_and_validate(self):
        """A token validates for the role it was issued for."""
        service = TokenService(SECRET, expire_minutes=30)
        token = service.issue("jane@example.com", UserRole.PATIENT)

        assert service.validate(token, "patient")
        assert service.inspect(token) == TokenState.VALID
        assert service.extract_email(token) == "jane@example.com"

    def test_default_role_is_patient(self):
        service = TokenService(SECRET)
        token = service.issue("jane@example.com")
        assert service.validate(token, UserRole.PATIENT)

    def test_wrong_role_rejected(self):
        """A patient token is not a doctor token."""
        service = TokenService(SECRET)
        token = service.issue("jane@example.com", UserRole.PATIENT)

        assert not service.validate(token, UserRole.DOCTOR)
        assert not service.validate(token, UserRole.ADMIN)
        # Identity is still readable; only the role check fails
        assert service.extract_email(token) == "jane@example.com"

    def test_expired_token(self):
        service = TokenService(SECRET, expire_minutes=-5)
        token = service.issue("jane@example.com", UserRole.PATIENT)

        assert service.inspect(token) == TokenState.EXPIRED
        assert not service.validate(token, UserRole.PATIENT)
        assert service.extract_email(token) is None

    def test_malformed_token(self):
        service = TokenService(SECRET)

        assert service.inspect("not-a-token") == TokenState.INVALID
        assert service.inspect("") == TokenState.INVALID
        assert not service.validate("not-a-token", UserRole.PATIENT)
        assert service.extract_email("not-a-token") is None

    def test_foreign_signature_rejected(self):
        """Tokens signed with another key are invalid."""
        issuer = TokenService("another-secret")
        verifier = TokenService(SECRET)
        token = issuer.issue("jane@example.com", UserRole.PATIENT)

        assert verifier.inspect(token) == TokenState.INVALID
        assert not verifier.validate(token, UserRole.PATIENT)

    def test_token_without_role_rejected(self):
        service = TokenService(SECRET)
        token = jwt.encode({"email": "jane@example.com"}, SECRET, algorithm="HS256")

        assert service.inspect(token) == TokenState.INVALID
        assert service.extract_email(token) is None

    def test_token_with_unknown_role_rejected(self):
        service = TokenService(SECRET)
        token = jwt.encode(
            {"email": "jane@example.com", "role": "nurse"}, SECRET, algorithm="HS256"
        )

        assert service.inspect(token) == TokenState.INVALID
