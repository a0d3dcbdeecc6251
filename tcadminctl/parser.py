# =============================================================================
# TCAdminClient Library – Response Parsing and Error Mapping
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Feránandez Rodríguez. All rights reserved.
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose, and non-infringement. In no event shall the
# authors or copyright holders be liable for any claim, damages, or other
# liability, whether in an action of contract, tort, or otherwise, arising from,
# out of, or in connection with the software or the use or other dealings in
# the software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license text should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
#  @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-10-19
# =============================================================================

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Union

from .exceptions import ERROR_RESPONSE_INVALID, TCAdminResponseFormatError
from .models import RemoteDocument, RemoteResult

FIELD_ERRORCODE = "errorcode"
FIELD_ERRORTEXT = "errortext"

logger = logging.getLogger(__name__)


def parse_document(raw: Union[bytes, str]) -> RemoteDocument:
    """
    Parse a raw response body into a RemoteDocument.

    Args:
        raw: HTTP body as returned by the panel.

    Raises:
        TCAdminResponseFormatError:
            If the body is empty or not well-formed XML.
    """
    if not raw or not raw.strip():
        raise TCAdminResponseFormatError("Unable to parse return as XML (empty body).")

    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        raise TCAdminResponseFormatError(f"Unable to parse return as XML: {exc}") from exc

    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return RemoteDocument(root, raw)


def check_response(document: RemoteDocument) -> RemoteResult:
    """
    Map a parsed document to a success or failure result.

    An absent or empty `errorcode` field, or a value of exactly zero, means
    success. Any other value is a failure whose code is normalized with
    abs(), so negative and positive panel codes collapse to the same
    client-visible code; the message is `errortext` verbatim.

    A non-numeric `errorcode` is also a failure, reported with
    ERROR_RESPONSE_INVALID as its code.
    """
    raw_code = document.get(FIELD_ERRORCODE)
    if raw_code is None or not raw_code.strip():
        return RemoteResult(document)

    try:
        code = abs(int(raw_code.strip()))
    except ValueError:
        logger.warning("Non-numeric %s in response: %r", FIELD_ERRORCODE, raw_code)
        code = ERROR_RESPONSE_INVALID

    if code == 0:
        return RemoteResult(document)

    message = document.get(FIELD_ERRORTEXT, "")
    logger.warning("Panel reported error %d: %s", code, message)
    return RemoteResult(document, error_code=code, error_msg=message)
