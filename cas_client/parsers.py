# -*- coding: utf-8 -*-
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License version 3 for
# more details.
#
# You should have received a copy of the GNU General Public License version 3
# along with this program; if not, write to the Free Software Foundation, Inc., 51
# Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.
#
# (c) 2016 Valentin Samir
"""
    Parsers of the CAS server validation responses

    Each parser takes the response body as text and returns a
    :class:`ValidationOutcome<cas_client.outcomes.ValidationOutcome>`. Parsers never raise:
    anything that does not match the expected grammar is a
    :class:`MalformedResponse<cas_client.outcomes.MalformedResponse>`.
"""
from lxml import etree

from .outcomes import Success, ProtocolFailure, MalformedResponse
from .utils import (
    parse_xml, localname, children, find_path, normalize_text, add_value, element_to_dict
)


def parse_cas1_response(body):
    """
        Parse a CAS 1.0 ``/validate`` response: ``yes\\n<username>\\n`` or ``no\\n``

        :param str body: The response body
        :rtype: cas_client.outcomes.ValidationOutcome
    """
    # only \n ends a line, a trailing \r is dropped for CRLF responses
    lines = [line[:-1] if line.endswith("\r") else line for line in body.split("\n")]
    if not body:
        return MalformedResponse("empty response")
    if lines[0] == "no":
        return ProtocolFailure()
    if lines[0] == "yes" and len(lines) >= 2 and lines[1]:
        return Success(lines[1])
    return MalformedResponse("unexpected response %r" % body[:100])


def parse_cas3_response(body):
    """
        Parse a CAS 3.0 ``/p3/serviceValidate`` XML response

        :param str body: The response body
        :rtype: cas_client.outcomes.ValidationOutcome
    """
    try:
        root = parse_xml(body)
    except (etree.XMLSyntaxError, ValueError) as error:
        return MalformedResponse("invalid XML: %s" % error)
    if localname(root) != "serviceresponse":
        return MalformedResponse("unexpected root element %s" % localname(root))

    failure = find_path(root, "authenticationfailure")
    if failure is not None:
        return ProtocolFailure(failure.get("code"), normalize_text(failure.text))

    success = find_path(root, "authenticationsuccess")
    if success is None:
        return MalformedResponse("neither authenticationSuccess nor authenticationFailure")
    profile = element_to_dict(success)
    user = find_path(success, "user")
    if user is None or not normalize_text(user.text):
        return MalformedResponse("authenticationSuccess without user")
    attributes = {}
    attributes_element = find_path(success, "attributes")
    if attributes_element is not None:
        for attribute in attributes_element:
            if isinstance(attribute.tag, str):
                add_value(attributes, localname(attribute), normalize_text(attribute.text))
    return Success(normalize_text(user.text), attributes, profile)


def parse_saml_response(body):
    """
        Parse a CAS 3.0 SAML 1.1 ``/samlValidate`` SOAP response

        :param str body: The response body
        :rtype: cas_client.outcomes.ValidationOutcome
    """
    try:
        root = parse_xml(body)
    except (etree.XMLSyntaxError, ValueError) as error:
        return MalformedResponse("invalid XML: %s" % error)
    if localname(root) != "envelope":
        return MalformedResponse("unexpected root element %s" % localname(root))

    response = find_path(root, "body", "response")
    status_code = find_path(response, "status", "statuscode")
    if status_code is None or status_code.get("Value") is None:
        return MalformedResponse("no StatusCode in the SAML response")
    status = status_code.get("Value")
    if not status.endswith("Success"):
        status_message = find_path(response, "status", "statusmessage")
        return ProtocolFailure(
            status.split(":")[-1],
            normalize_text(status_message.text) if status_message is not None else ""
        )

    assertion = find_path(response, "assertion")
    name_identifier = find_path(
        assertion, "authenticationstatement", "subject", "nameidentifier"
    )
    if name_identifier is None or not normalize_text(name_identifier.text):
        return MalformedResponse("no NameIdentifier in the SAML assertion")
    user = normalize_text(name_identifier.text)

    attributes = {}
    for attribute in children(find_path(assertion, "attributestatement"), "attribute"):
        name = attribute.get("AttributeName") or attribute.get("Name")
        if not name:
            return MalformedResponse("SAML attribute without name")
        for value in children(attribute, "attributevalue"):
            add_value(attributes, name.lower(), normalize_text(value.text))
    return Success(user, attributes, {"user": user, "attributes": attributes})
