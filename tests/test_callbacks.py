"""
Tests for the authentication tree documents (callbacks.py).

Covers:
  1. Callback kind dispatch (known kinds, anything else UNSUPPORTED)
  2. Filling credentials in server order, failing closed
  3. Resubmitted document differs from the received one only in inputs
  4. Malformed challenges rejected as protocol errors
  5. LoginResult token detection
"""

import copy

import pytest

from conftest import challenge_doc, name_callback, password_callback
from forgerock_sso.auth.callbacks import (
    AuthChallenge,
    CallbackKind,
    LoginResult,
)
from forgerock_sso.auth.credentials import Credentials
from forgerock_sso.errors import ProtocolError

CREDS = Credentials(username="jdoe", password="s3cret")


# ====================================================================
# 1. Kind dispatch
# ====================================================================

class TestCallbackKind:

    def test_known_types(self):
        assert CallbackKind.from_type("NameCallback") is CallbackKind.NAME
        assert CallbackKind.from_type("PasswordCallback") is CallbackKind.PASSWORD

    def test_unknown_type_is_unsupported(self):
        assert CallbackKind.from_type("ChoiceCallback") is CallbackKind.UNSUPPORTED

    def test_placeholder_value_is_not_a_server_type(self):
        """The UNSUPPORTED member's value never matches a real callback."""
        assert CallbackKind.from_type("unsupported") is CallbackKind.UNSUPPORTED

    def test_match_is_case_sensitive(self):
        assert CallbackKind.from_type("namecallback") is CallbackKind.UNSUPPORTED


# ====================================================================
# 2. Filling credentials
# ====================================================================

class TestFillCredentials:

    def test_fills_first_input_of_each_callback(self):
        challenge = AuthChallenge.from_dict(challenge_doc())
        challenge.fill_credentials(CREDS)
        assert challenge.callbacks[0].inputs[0].value == "jdoe"
        assert challenge.callbacks[1].inputs[0].value == "s3cret"

    def test_reordered_callbacks_still_filled_correctly(self):
        """The server decides the order; filling follows the declared type."""
        doc = challenge_doc(password_callback(_id=0), name_callback(_id=1))
        challenge = AuthChallenge.from_dict(doc)
        challenge.fill_credentials(CREDS)
        assert challenge.callbacks[0].inputs[0].value == "s3cret"
        assert challenge.callbacks[1].inputs[0].value == "jdoe"

    def test_unsupported_callback_names_type(self):
        doc = challenge_doc(
            name_callback(),
            password_callback(),
            {"type": "ChoiceCallback", "output": [], "input": [{"name": "IDToken3", "value": 0}]},
        )
        challenge = AuthChallenge.from_dict(doc)
        with pytest.raises(ProtocolError, match="ChoiceCallback"):
            challenge.fill_credentials(CREDS)

    def test_missing_password_callback(self):
        challenge = AuthChallenge.from_dict(challenge_doc(name_callback()))
        with pytest.raises(ProtocolError, match="PasswordCallback"):
            challenge.fill_credentials(CREDS)

    def test_missing_name_callback(self):
        challenge = AuthChallenge.from_dict(challenge_doc(password_callback()))
        with pytest.raises(ProtocolError, match="NameCallback"):
            challenge.fill_credentials(CREDS)

    def test_missing_callback_error_does_not_leak_password(self):
        doc = challenge_doc(password_callback())
        challenge = AuthChallenge.from_dict(doc)
        with pytest.raises(ProtocolError) as excinfo:
            challenge.fill_credentials(CREDS)
        assert "s3cret" not in str(excinfo.value)

    def test_known_callback_without_input_slot(self):
        cb = name_callback()
        cb["input"] = []
        challenge = AuthChallenge.from_dict(challenge_doc(cb, password_callback()))
        with pytest.raises(ProtocolError, match="no input"):
            challenge.fill_credentials(CREDS)


# ====================================================================
# 3. Round trip
# ====================================================================

class TestRoundTrip:

    def test_only_input_values_change(self):
        received = challenge_doc()
        challenge = AuthChallenge.from_dict(copy.deepcopy(received))
        challenge.fill_credentials(CREDS)
        sent = challenge.to_dict()

        expected = copy.deepcopy(received)
        expected["callbacks"][0]["input"][0]["value"] = "jdoe"
        expected["callbacks"][1]["input"][0]["value"] = "s3cret"
        assert sent == expected

    def test_auth_id_echoed_unmodified(self):
        received = challenge_doc()
        challenge = AuthChallenge.from_dict(received)
        assert challenge.to_dict()["authId"] == received["authId"]

    def test_unmodelled_callback_keys_preserved(self):
        cb = name_callback()
        cb["meta"] = {"hint": "email"}
        challenge = AuthChallenge.from_dict(challenge_doc(cb, password_callback()))
        assert challenge.to_dict()["callbacks"][0]["meta"] == {"hint": "email"}

    def test_callback_without_id_omits_it(self):
        cb = name_callback()
        del cb["_id"]
        challenge = AuthChallenge.from_dict(challenge_doc(cb, password_callback()))
        assert "_id" not in challenge.to_dict()["callbacks"][0]

    def test_multiple_inputs_keep_count_and_order(self):
        cb = name_callback()
        cb["input"].append({"name": "IDToken1validateOnly", "value": False})
        challenge = AuthChallenge.from_dict(challenge_doc(cb, password_callback()))
        challenge.fill_credentials(CREDS)
        inputs = challenge.to_dict()["callbacks"][0]["input"]
        assert inputs == [
            {"name": "IDToken1", "value": "jdoe"},
            {"name": "IDToken1validateOnly", "value": False},
        ]


# ====================================================================
# 4. Malformed documents
# ====================================================================

class TestMalformed:

    @pytest.mark.parametrize("doc", [
        [],
        "not an object",
        {"callbacks": []},
        {"authId": "", "callbacks": []},
        {"authId": "x"},
        {"authId": "x", "callbacks": [{"output": []}]},
        {"authId": "x", "callbacks": [{"type": "NameCallback", "input": [{"value": ""}]}]},
    ])
    def test_rejected(self, doc):
        with pytest.raises(ProtocolError):
            AuthChallenge.from_dict(doc)

    def test_describe_lists_types_and_prompts(self):
        challenge = AuthChallenge.from_dict(challenge_doc())
        assert challenge.describe() == (
            "AuthChallenge(callbacks=[NameCallback('User Name'), "
            "PasswordCallback('Password')])"
        )


# ====================================================================
# 5. LoginResult
# ====================================================================

class TestLoginResult:

    def test_token_present(self):
        result = LoginResult.from_dict({"tokenId": "abc", "successUrl": "/am/console", "realm": "/"})
        assert result.is_authenticated
        assert result.success_url == "/am/console"

    @pytest.mark.parametrize("data", [{}, {"tokenId": ""}, {"tokenId": None}, None, ["tokenId"]])
    def test_token_absent(self, data):
        assert not LoginResult.from_dict(data).is_authenticated
