# =============================================================================
# TCAdmin – Scripted web client for the panel GUI
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
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from tcadminctl.exceptions import TCAdminTransportError

logger = logging.getLogger(__name__)

_SKIPPED_INPUT_TYPES = ("submit", "button", "image", "reset", "file")


class ScriptedBrowser:
    """
    Very small form-driving browser on top of requests + BeautifulSoup.

    It keeps cookies across requests, sends a fixed User-Agent on every
    request (leaving the session headers untouched), and can fill
    and submit a form the way a user would: every field already present in
    the form (hidden ASP.NET state included) is posted back, with the values
    set through `set_field_by_name()` taking precedence.
    """

    def __init__(
        self,
        user_agent: str,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.headers = {"User-Agent": user_agent}
        self.timeout_s = timeout_s

        self.url: Optional[str] = None
        self.soup: Optional[BeautifulSoup] = None
        self._fields: Dict[str, str] = {}

    def _load(self, response: requests.Response) -> None:
        response.raise_for_status()
        self.url = response.url
        self.soup = BeautifulSoup(response.text, "html.parser")
        self._fields = {}

    def get(self, url: str) -> None:
        """Fetch `url` and make it the current page."""
        try:
            self._load(self.session.get(url, headers=self.headers, timeout=self.timeout_s))
        except requests.RequestException as exc:
            raise TCAdminTransportError(f"Unable to load {url}. Error: {exc}") from exc

    @property
    def title(self) -> str:
        if self.soup is None or self.soup.title is None:
            return ""
        return self.soup.title.get_text(strip=True)

    def set_field_by_name(self, name: str, value: str) -> None:
        self._fields[name] = value

    def click_submit_by_name(self, name: str) -> bool:
        """
        Submit the form that holds the submit control called `name`.

        Returns:
            False if the current page has no such control, True once the
            resulting page is loaded.

        Raises:
            TCAdminTransportError: if the submission request fails.
        """
        if self.soup is None:
            return False

        button = self.soup.find(["input", "button"], attrs={"name": name})
        form = button.find_parent("form") if button is not None else None
        if form is None:
            return False

        data = dict(self._form_values(form))
        data.update(self._fields)
        data[name] = button.get("value", "")

        action = urljoin(self.url or "", form.get("action") or "")
        method = (form.get("method") or "get").lower()
        logger.debug("Submitting form via %s to %s", name, action)

        try:
            if method == "post":
                r = self.session.post(
                    action, data=data, headers=self.headers, timeout=self.timeout_s
                )
            else:
                r = self.session.get(
                    action, params=data, headers=self.headers, timeout=self.timeout_s
                )
            self._load(r)
        except requests.RequestException as exc:
            raise TCAdminTransportError(f"Unable to submit form to {action}. Error: {exc}") from exc
        return True

    def get_current_cookie_value(self, name: str) -> Optional[str]:
        return self.session.cookies.get(name)

    @staticmethod
    def _form_values(form) -> List[Tuple[str, str]]:
        values: List[Tuple[str, str]] = []
        for field in form.find_all(["input", "textarea", "select"]):
            name = field.get("name")
            if not name:
                continue

            if field.name == "input":
                kind = (field.get("type") or "text").lower()
                if kind in _SKIPPED_INPUT_TYPES:
                    continue
                if kind in ("checkbox", "radio") and not field.has_attr("checked"):
                    continue
                values.append((name, field.get("value", "")))
            elif field.name == "textarea":
                values.append((name, field.get_text()))
            else:
                option = field.find("option", selected=True) or field.find("option")
                if option is not None:
                    values.append((name, option.get("value", option.get_text())))
        return values
