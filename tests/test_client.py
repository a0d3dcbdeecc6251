from unittest.mock import MagicMock

import pytest
import requests

from conftest import CONNECT_STRING, make_response, sent_data, sent_timeout
from tcadminctl.client import (
    FIELD_FUNCTION,
    FIELD_PASSWORD,
    FIELD_RESPONSETYPE,
    FIELD_USERNAME,
    TCAdminClient,
)
from tcadminctl.exceptions import (
    TCAdminConfigurationError,
    TCAdminEnvironmentError,
    TCAdminResponseFormatError,
    TCAdminTransportError,
)


class TestConstruction:
    def test_endpoint(self, session):
        client = TCAdminClient(CONNECT_STRING, session=session)
        assert client.endpoint == "https://panel.example.com/billingapi.aspx"
        assert client.timeout_s == 30.0

    def test_incomplete_connect_string(self, session):
        with pytest.raises(TCAdminConfigurationError):
            TCAdminClient("https://panel.example.com/billingapi.aspx", session=session)

    def test_unusable_transport(self):
        with pytest.raises(TCAdminEnvironmentError) as info:
            TCAdminClient(CONNECT_STRING, session=object())
        assert info.value.code == 1
        assert str(info.value).startswith("TCAdmin: ")

    def test_default_session(self):
        client = TCAdminClient(CONNECT_STRING)
        assert isinstance(client.session, requests.Session)


class TestRemoteCall:
    def test_posts_form_with_credentials(self, session):
        client = TCAdminClient(CONNECT_STRING, session=session)
        client.remote_call({FIELD_FUNCTION: "GetSupportedGames"})

        args, kwargs = session.post.call_args
        assert args[0] == "https://panel.example.com/billingapi.aspx"
        assert kwargs["data"] == {
            FIELD_FUNCTION: "GetSupportedGames",
            FIELD_USERNAME: "apiuser",
            FIELD_PASSWORD: "s3cret",
            FIELD_RESPONSETYPE: "xml",
        }
        assert kwargs["allow_redirects"] is False

    def test_auth_fields_cannot_be_overridden(self, session):
        client = TCAdminClient(CONNECT_STRING, session=session)
        client.remote_call({
            FIELD_FUNCTION: "UpdateSettings",
            FIELD_USERNAME: "intruder",
            FIELD_PASSWORD: "guess",
            FIELD_RESPONSETYPE: "text",
        })

        data = sent_data(session)
        assert data[FIELD_USERNAME] == "apiuser"
        assert data[FIELD_PASSWORD] == "s3cret"
        assert data[FIELD_RESPONSETYPE] == "xml"

    def test_values_are_stringified(self, session):
        client = TCAdminClient(CONNECT_STRING, session=session)
        client.remote_call({FIELD_FUNCTION: "X", "client_package_id": 42})
        assert sent_data(session)["client_package_id"] == "42"

    def test_default_and_override_timeout(self, session):
        client = TCAdminClient(CONNECT_STRING, timeout_s=15, session=session)
        client.remote_call({FIELD_FUNCTION: "X"})
        assert sent_timeout(session) == (15.0, 15.0)

        client.remote_call({FIELD_FUNCTION: "X"}, timeout=300)
        assert sent_timeout(session) == (300.0, 300.0)

    def test_returns_document_without_error_mapping(self, session):
        session.post.return_value = make_response(
            "<response><errorcode>-3</errorcode><errortext>nope</errortext></response>"
        )
        client = TCAdminClient(CONNECT_STRING, session=session)
        doc = client.remote_call({FIELD_FUNCTION: "X"})
        assert doc.get("errorcode") == "-3"

    def test_network_failure(self, session):
        session.post.side_effect = requests.ConnectionError("Name or service not known")
        client = TCAdminClient(CONNECT_STRING, session=session)

        with pytest.raises(TCAdminTransportError) as info:
            client.remote_call({FIELD_FUNCTION: "X"})
        assert "Name or service not known" in str(info.value)
        assert info.value.code == 3
        assert session.post.call_count == 1

    def test_timeout(self, session):
        session.post.side_effect = requests.Timeout("read timed out")
        client = TCAdminClient(CONNECT_STRING, session=session)
        with pytest.raises(TCAdminTransportError):
            client.remote_call({FIELD_FUNCTION: "X"})

    @pytest.mark.parametrize("status", [401, 404, 500, 503])
    def test_http_error_status(self, session, status):
        session.post.return_value = make_response("<response/>", status_code=status)
        client = TCAdminClient(CONNECT_STRING, session=session)
        with pytest.raises(TCAdminTransportError):
            client.remote_call({FIELD_FUNCTION: "X"})

    def test_redirect_is_not_followed(self, session):
        session.post.return_value = make_response(
            "", status_code=302, headers={"Location": "https://panel.example.com/login.aspx"}
        )
        client = TCAdminClient(CONNECT_STRING, session=session)
        with pytest.raises(TCAdminTransportError) as info:
            client.remote_call({FIELD_FUNCTION: "X"})
        assert "login.aspx" in str(info.value)

    @pytest.mark.parametrize("body", ["", "<html><body>Error", "Access denied"])
    def test_malformed_body(self, session, body):
        session.post.return_value = make_response(body)
        client = TCAdminClient(CONNECT_STRING, session=session)
        with pytest.raises(TCAdminResponseFormatError):
            client.remote_call({FIELD_FUNCTION: "X"})

    def test_password_is_not_logged(self, session, caplog):
        client = TCAdminClient(CONNECT_STRING, session=session)
        with caplog.at_level("DEBUG", logger="tcadminctl"):
            client.remote_call({FIELD_FUNCTION: "GetSupportedGames"})
        assert "GetSupportedGames" in caplog.text
        assert "s3cret" not in caplog.text


def test_session_without_post_attribute_mock():
    broken = MagicMock(spec=[])
    with pytest.raises(TCAdminEnvironmentError):
        TCAdminClient(CONNECT_STRING, session=broken)
