# =============================================================================
# TCAdmin - High-level panel API built on top of TCAdminClient
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Fernández Rodríguez
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose and noninfringement. In no event shall the
# authors or copyright holders be liable for any claim, damages or other
# liability, whether in an action of contract, tort or otherwise, arising from,
# out of or in connection with the software or the use or other dealings in the
# software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
# @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-10-19
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from tcadminctl.client import FIELD_FUNCTION, TCAdminClient
from tcadminctl.exceptions import ERROR_NONE
from tcadminctl.models import RESPONSE_TYPE_XML, RemoteDocument, RemoteResult
from tcadminctl.parser import check_response

from .browser import ScriptedBrowser
from .config import DEFAULT_TIMEOUT_S, DELETE_TIMEOUT_S, TCAdminConfig, default_config
from .models import LoginResult

# Service fields understood by AddPendingSetup / UpdateSettings.
FIELD_CLIENT_PACKAGE_ID = "client_package_id"
FIELD_CLIENT_ID = "client_id"
FIELD_SKIP_PAGE = "skip_page"
FIELD_USER_EMAIL = "user_email"
FIELD_USER_NAME = "user_name"
FIELD_USER_FNAME = "user_fname"
FIELD_USER_LNAME = "user_lname"
FIELD_USER_PASSWORD = "user_password"

# Query keys understood by the GUI pages.
GET_SERVICEID = "serviceid"
GET_SERVICE_DESCSHORT = "svc_short_desc"
GET_RETURNTO = "returnto"
GET_MVSID = "mvsid"
GET_VVSID = "vvsid"
GET_VOICETYPE = "voicetype"

# Setup states reported by the panel for queued services.
SETUP_PENDING = 1
SETUP_COMPLETE = 2
SETUP_ERRORED = 3

logger = logging.getLogger(__name__)


class TCAdmin(TCAdminClient):
    """
    High-level client for a TCAdmin game hosting panel.

    `TCAdmin` extends :class:`tcadminctl.client.TCAdminClient` with one method
    per panel function, the legacy last-error accessors, and helpers for the
    panel web GUI (link building and cookie login).

    Listing functions return the RemoteDocument as-is. Service functions map
    the `errorcode` convention into a RemoteResult and also record the error
    as the client's last error.

    The last-error state is per instance and not synchronized; share an
    instance across threads only behind your own lock, or use the returned
    RemoteResult, which carries the same code and message.
    """

    # ---- Listing functions (not error-checked) ----
    CMD_GET_GAMESERVERS = "GetSupportedGames"
    CMD_GET_VOICESERVERS = "GetSupportedVoiceServers"

    # ---- Service functions (error-checked) ----
    CMD_ADD_SETUP = "AddPendingSetup"
    CMD_SUSPEND_SERVICES = "SuspendGameAndVoiceByBillingID"
    CMD_UNSUSPEND_SERVICES = "UnSuspendGameAndVoiceByBillingID"
    CMD_DELETE_SERVICES = "DeleteGameAndVoiceByBillingID"
    CMD_UPDATE_SETTINGS = "UpdateSettings"

    # ---- Other panel functions, called directly through remote_call() ----
    CMD_UPDATE_PASSWORD = "ChangePassword"

    # ---- GUI pages, relative to the GUI root ----
    PATH_LOGIN = "login.aspx"
    PATH_USERHOME = "user_home.aspx"
    PATH_SERVICES = "services.aspx"
    PATH_SERVICEHOME = "service_home.aspx"
    PATH_VOICESERVERS = "voiceservers.aspx"
    PATH_VOICESERVICEHOME = "vvoiceserver_home.aspx"

    LOGIN_SUCCESS_TITLE = "User Main Menu"

    def __init__(
            self,
            connect_string: Optional[str],
            root_url: Optional[str] = None,
            timeout_s: float = DEFAULT_TIMEOUT_S,
            delete_timeout_s: float = DELETE_TIMEOUT_S,
            response_type: str = RESPONSE_TYPE_XML,
            session: Optional[requests.Session] = None,
    ):
        super().__init__(
            connect_string,
            timeout_s=timeout_s,
            response_type=response_type,
            session=session,
        )
        self.gui_root = root_url
        self.delete_timeout_s = float(delete_timeout_s)
        self._error_no = ERROR_NONE
        self._error_msg = ""

    @classmethod
    def factory(
            cls,
            config: Optional[TCAdminConfig] = None,
            session: Optional[requests.Session] = None,
    ) -> "TCAdmin":
        """
        Build a client from shared configuration.

        Args:
            config: Settings to use. Defaults to `default_config()`, read once
                from the TCADMIN_* environment variables.
            session: Optional preconfigured requests.Session.
        """
        config = config if config is not None else default_config()
        return cls(
            config.connect_string,
            root_url=config.root_url,
            timeout_s=config.timeout,
            delete_timeout_s=config.delete_timeout,
            response_type=config.response_type,
            session=session,
        )

    # ---- Last error (legacy accessors) ----

    def get_error_code(self) -> int:
        """Absolute value of the last panel `errorcode`, 0 if none yet."""
        return self._error_no

    def get_error_msg(self) -> str:
        """`errortext` of the last panel error, "" if none yet."""
        return self._error_msg

    def _checked_call(
            self,
            parameters: Mapping[str, Any],
            timeout: Optional[float] = None,
    ) -> RemoteResult:
        result = check_response(self.remote_call(parameters, timeout))
        if not result.ok:
            self._error_no = result.error_code
            self._error_msg = result.error_msg
        return result

    # ---- Listing functions ----

    def list_game_servers(self) -> RemoteDocument:
        """
        Get the list of games supported by the panel.

        Returns:
            The panel answer as-is; no `errorcode` mapping is applied.
        """
        return self.remote_call({FIELD_FUNCTION: self.CMD_GET_GAMESERVERS})

    def list_voice_servers(self) -> RemoteDocument:
        """
        Get the list of voice servers supported by the panel.

        Returns:
            The panel answer as-is; no `errorcode` mapping is applied.
        """
        return self.remote_call({FIELD_FUNCTION: self.CMD_GET_VOICESERVERS})

    # ---- Service functions ----

    def add_service(self, data: Optional[Mapping[str, Any]] = None) -> RemoteResult:
        """
        Queue a new game and/or voice service for setup.

        Args:
            data: Service fields (client id, package id, game id, slots, user
                details...), posted as-is.

        Returns:
            RemoteResult; falsy when the panel rejected the setup.

        Raises:
            TCAdminTransportError / TCAdminResponseFormatError:
                Raised by the parent client when request/parse fails.
        """
        parameters: Dict[str, Any] = dict(data or {})
        parameters[FIELD_FUNCTION] = self.CMD_ADD_SETUP
        return self._checked_call(parameters)

    def suspend_service(self, package_id: Any) -> RemoteResult:
        """Suspend every game and voice server of a billing package."""
        return self._checked_call({
            FIELD_FUNCTION: self.CMD_SUSPEND_SERVICES,
            FIELD_CLIENT_PACKAGE_ID: package_id,
        })

    def unsuspend_service(self, package_id: Any) -> RemoteResult:
        """Lift the suspension of every server of a billing package."""
        return self._checked_call({
            FIELD_FUNCTION: self.CMD_UNSUSPEND_SERVICES,
            FIELD_CLIENT_PACKAGE_ID: package_id,
        })

    def delete_service(self, package_id: Any) -> RemoteResult:
        """
        Delete every game and voice server of a billing package.

        The panel removes files synchronously, so this call uses
        `delete_timeout_s` instead of the default timeout.
        """
        return self._checked_call(
            {
                FIELD_FUNCTION: self.CMD_DELETE_SERVICES,
                FIELD_CLIENT_PACKAGE_ID: package_id,
            },
            timeout=self.delete_timeout_s,
        )

    def update_service(
            self,
            package_id: Any,
            data: Optional[Mapping[str, Any]] = None,
    ) -> RemoteResult:
        """
        Change settings of the servers of a billing package.

        Args:
            package_id: Billing package id of the service.
            data: Settings to change. A package id in `data` is replaced by
                `package_id`.
        """
        parameters: Dict[str, Any] = dict(data or {})
        parameters[FIELD_FUNCTION] = self.CMD_UPDATE_SETTINGS
        parameters[FIELD_CLIENT_PACKAGE_ID] = package_id
        return self._checked_call(parameters)

    # ---- Web GUI ----

    def login(
            self,
            username: str,
            password: str,
            useragent: str,
            cookie_name: str,
            session: Optional[requests.Session] = None,
    ) -> Optional[LoginResult]:
        """
        Log a user into the panel GUI and capture its session cookie.

        The login page is driven like a browser would: the form is filled with
        `username` and `password` and submitted with the `ButtonLogin` button.
        Landing on the user main menu means success.

        Args:
            username: Panel user name.
            password: Panel user password.
            useragent: User-Agent to present, usually the end user's own so
                the cookie can be handed over to their browser.
            cookie_name: Name of the session cookie set by the panel.
            session: Optional requests.Session for the browser. A fresh one
                is used by default so API credentials never mix with the
                user's cookies.

        Returns:
            LoginResult on success, None if the panel refused the login.

        Raises:
            TCAdminTransportError: if a page cannot be loaded.
        """
        browser = ScriptedBrowser(useragent, timeout_s=self.timeout_s, session=session)
        browser.get(self.get_url_login())

        browser.set_field_by_name("UserName", username)
        browser.set_field_by_name("Password", password)
        if not browser.click_submit_by_name("ButtonLogin"):
            logger.warning("Login form not found at %s", self.get_url_login())
            return None

        if self.LOGIN_SUCCESS_TITLE.lower() not in browser.title.lower():
            logger.warning("Login refused for user %s", username)
            return None

        return LoginResult(cookie_value=browser.get_current_cookie_value(cookie_name))

    def _gui_url(self, path: str, args: Optional[Mapping[str, Any]] = None) -> str:
        query = ""
        if args:
            query = "?" + urlencode(args)
        return (self.gui_root or "") + path + query

    def get_url_root(self) -> Optional[str]:
        return self.gui_root

    def get_url_login(self) -> str:
        return self._gui_url(self.PATH_LOGIN)

    def get_url_user_home(self) -> str:
        return self._gui_url(self.PATH_USERHOME)

    def get_url_services(self) -> str:
        return self._gui_url(self.PATH_SERVICES)

    def get_url_voice_servers(self) -> str:
        return self._gui_url(self.PATH_VOICESERVERS)

    def get_url_service(self, args: Optional[Mapping[str, Any]] = None) -> str:
        """Home page of a game service, e.g. args={GET_SERVICEID: 12}."""
        return self._gui_url(self.PATH_SERVICEHOME, args)

    def get_url_service_voice(self, args: Optional[Mapping[str, Any]] = None) -> str:
        """Home page of a voice service, e.g. args={GET_VVSID: 3}."""
        return self._gui_url(self.PATH_VOICESERVICEHOME, args)
