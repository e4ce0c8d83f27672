import re
from datetime import timedelta

import pytest

from tocapi.constants import INVALID_RESET_TOKEN_MESSAGE, RESET_REQUEST_ACCEPTED_MESSAGE
from tocapi.utils.exceptions import InvalidTokenError, ValidationError
from tocapi.utils.hashing import generate_reset_token

from conftest import START

EMAIL = "jane@example.com"
OLD_PASSWORD = "OldPassw0rd"
NEW_PASSWORD = "NewPassw0rd"


@pytest.fixture
def account(accounts, hasher):
    return accounts.add_account(EMAIL, hasher.hash(OLD_PASSWORD), name="Jane")


def issued_code(notifier):
    assert notifier.sent, "no reset code was delivered"
    return notifier.sent[-1].token


class RaisingNotifier:
    def send_reset_code(self, account, email, token):
        raise ConnectionError("SMTP relay unreachable")


def test_generated_token_format():
    token = generate_reset_token()
    assert re.fullmatch(r"[0-9A-F]{8}", token)


class TestRequestReset:
    def test_unknown_email_gets_generic_answer(self, reset_service, tokens, notifier):
        first = reset_service.request_reset("nobody@example.com")
        second = reset_service.request_reset("nobody@example.com")

        assert first == second
        assert first.accepted is True
        assert first.message == RESET_REQUEST_ACCEPTED_MESSAGE
        assert tokens.tokens == {}
        assert notifier.sent == []

    def test_known_email_gets_same_answer(self, reset_service, account):
        known = reset_service.request_reset(EMAIL)
        unknown = reset_service.request_reset("nobody@example.com")
        assert known == unknown

    def test_issues_token_with_ttl(self, reset_service, account, tokens, notifier):
        reset_service.request_reset(EMAIL)

        [record] = tokens.tokens.values()
        assert record.user_id == account.user_id
        assert record.email == EMAIL
        assert record.expires_at == START + timedelta(minutes=15)
        assert record.token == issued_code(notifier)
        assert re.fullmatch(r"[0-9A-F]{8}", record.token)

    def test_email_is_normalized(self, reset_service, account, tokens):
        reset_service.request_reset("Jane@Example.COM")
        [record] = tokens.tokens.values()
        assert record.email == EMAIL

    def test_new_request_supersedes_previous_code(self, reset_service, account, tokens, notifier):
        reset_service.token_factory = iter(["AAAA0000", "BBBB1111"]).__next__
        reset_service.request_reset(EMAIL)
        reset_service.request_reset(EMAIL)

        assert [sent.token for sent in notifier.sent] == ["AAAA0000", "BBBB1111"]
        assert len(tokens.tokens) == 1
        with pytest.raises(InvalidTokenError):
            reset_service.verify_and_reset(EMAIL, "AAAA0000", NEW_PASSWORD)
        assert reset_service.verify_and_reset(EMAIL, "BBBB1111", NEW_PASSWORD).success

    def test_failed_delivery_is_not_reported(self, reset_service, account, tokens, notifier):
        notifier.fail_with = "quota exceeded"
        result = reset_service.request_reset(EMAIL)
        assert result.accepted is True
        assert result.message == RESET_REQUEST_ACCEPTED_MESSAGE
        assert len(tokens.tokens) == 1

    def test_raising_notifier_is_not_reported(self, reset_service, account, tokens):
        reset_service.notifier = RaisingNotifier()
        result = reset_service.request_reset(EMAIL)
        assert result.accepted is True
        assert len(tokens.tokens) == 1

    @pytest.mark.parametrize("email", [None, "", "not-an-email"])
    def test_invalid_email_is_rejected(self, reset_service, email):
        with pytest.raises(ValidationError):
            reset_service.request_reset(email)


class TestVerifyAndReset:
    def test_resets_password(self, reset_service, account, accounts, hasher, notifier):
        reset_service.request_reset(EMAIL)
        result = reset_service.verify_and_reset(EMAIL, issued_code(notifier), NEW_PASSWORD)

        assert result.success is True
        assert result.message == "Password reset successful"
        stored = accounts.find_by_email(EMAIL)
        assert hasher.verify(NEW_PASSWORD, stored.password_hash)
        assert not hasher.verify(OLD_PASSWORD, stored.password_hash)

    def test_code_is_single_use(self, reset_service, account, tokens, notifier):
        reset_service.request_reset(EMAIL)
        code = issued_code(notifier)
        reset_service.verify_and_reset(EMAIL, code, NEW_PASSWORD)

        assert tokens.tokens == {}
        with pytest.raises(InvalidTokenError):
            reset_service.verify_and_reset(EMAIL, code, "Another1Pass")

    def test_code_is_case_insensitive(self, reset_service, account, notifier):
        reset_service.request_reset(EMAIL)
        code = issued_code(notifier)
        assert reset_service.verify_and_reset(EMAIL.upper(), code.lower(), NEW_PASSWORD).success

    def test_expired_code(self, reset_service, account, notifier, clock):
        reset_service.request_reset(EMAIL)
        clock.advance(minutes=16)

        with pytest.raises(InvalidTokenError) as exc_info:
            reset_service.verify_and_reset(EMAIL, issued_code(notifier), NEW_PASSWORD)
        assert exc_info.value.message == INVALID_RESET_TOKEN_MESSAGE

    def test_code_valid_until_expiry(self, reset_service, account, notifier, clock):
        reset_service.request_reset(EMAIL)
        clock.advance(minutes=14, seconds=59)
        assert reset_service.verify_and_reset(EMAIL, issued_code(notifier), NEW_PASSWORD).success

    def test_code_bound_to_email(self, reset_service, account, accounts, hasher, notifier):
        accounts.add_account("other@example.com", hasher.hash(OLD_PASSWORD))
        reset_service.request_reset(EMAIL)
        with pytest.raises(InvalidTokenError):
            reset_service.verify_and_reset("other@example.com", issued_code(notifier), NEW_PASSWORD)

    def test_wrong_code(self, reset_service, account):
        reset_service.request_reset(EMAIL)
        with pytest.raises(InvalidTokenError):
            reset_service.verify_and_reset(EMAIL, "ZZZZZZZZ", NEW_PASSWORD)

    @pytest.mark.parametrize("token, password", [("", NEW_PASSWORD), ("ABCD1234", ""), (None, None)])
    def test_token_and_password_required(self, reset_service, token, password):
        with pytest.raises(ValidationError, match="Token and new password are required"):
            reset_service.verify_and_reset(EMAIL, token, password)

    def test_password_over_bcrypt_limit_is_rejected(self, reset_service, account, accounts, tokens, notifier, hasher):
        reset_service.request_reset(EMAIL)
        code = issued_code(notifier)

        with pytest.raises(ValidationError, match="must not exceed 72 bytes"):
            reset_service.verify_and_reset(EMAIL, code, "Aa1" + "x" * 80)

        assert len(tokens.tokens) == 1
        assert hasher.verify(OLD_PASSWORD, accounts.find_by_email(EMAIL).password_hash)

    def test_weak_password_keeps_code(self, reset_service, account, accounts, tokens, notifier, hasher):
        reset_service.request_reset(EMAIL)
        code = issued_code(notifier)

        with pytest.raises(ValidationError, match="uppercase"):
            reset_service.verify_and_reset(EMAIL, code, "abc12345")

        assert len(tokens.tokens) == 1
        assert hasher.verify(OLD_PASSWORD, accounts.find_by_email(EMAIL).password_hash)
        assert reset_service.verify_and_reset(EMAIL, code, NEW_PASSWORD).success


class TestPurgeExpiredTokens:
    def test_removes_only_expired(self, reset_service, accounts, hasher, tokens, clock):
        accounts.add_account("a@example.com", hasher.hash(OLD_PASSWORD))
        accounts.add_account("b@example.com", hasher.hash(OLD_PASSWORD))
        reset_service.request_reset("a@example.com")
        clock.advance(minutes=10)
        reset_service.request_reset("b@example.com")
        clock.advance(minutes=6)

        assert reset_service.purge_expired_tokens() == 1
        [remaining] = tokens.tokens.values()
        assert remaining.email == "b@example.com"

    def test_nothing_to_purge(self, reset_service):
        assert reset_service.purge_expired_tokens() == 0
