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
"""Builders of the ticket validation requests sent to the CAS server"""
from django.utils import timezone

from uuid import uuid4
from urllib.parse import urlparse, parse_qsl, urlencode
from xml.sax.saxutils import escape

#: Default validation path for CAS 1.0
CAS1_VALIDATE_PATH = "/validate"
#: Default validation path for CAS 3.0
CAS3_VALIDATE_PATH = "/p3/serviceValidate"
#: Default validation path for CAS 3.0 SAML 1.1
SAML_VALIDATE_PATH = "/samlValidate"

SAML_ASSERTION_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
<SOAP-ENV:Header/>
<SOAP-ENV:Body>
<samlp:Request xmlns:samlp="urn:oasis:names:tc:SAML:1.0:protocol"
MajorVersion="1"
MinorVersion="1"
RequestID="{request_id}"
IssueInstant="{timestamp}">
<samlp:AssertionArtifact>{ticket}</samlp:AssertionArtifact></samlp:Request>
</SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""

#: HTTP headers of the SAML validation request
SAML_HEADERS = {
    'soapaction': 'http://www.oasis-open.org/committees/security',
    'cache-control': 'no-cache',
    'pragma': 'no-cache',
    'accept': 'text/xml',
    'content-type': 'text/xml; charset=utf-8',
}


class ValidationRequest(object):
    """
        A ticket validation request, ready to be sent by the transport

        :param str method: ``"GET"`` or ``"POST"``
        :param str path: The validation path (or absolute URL)
        :param list params: The query string parameters as a list of ``(key, value)``
        :param str ticket: The service ticket to validate
        :param str service: The service URL the ticket was issued for
        :param bytes body: An optional request body
        :param dict headers: Optional HTTP headers
        :raises ValueError: if ``ticket`` or ``service`` is empty or if ``service`` has a
            ``ticket`` GET parameter
    """

    #: The HTTP method
    method = None
    #: The validation path, relative to the CAS server base path, or an absolute URL
    path = None
    #: The query string parameters
    params = None
    #: The service ticket
    ticket = None
    #: The service URL
    service = None
    #: The request body, ``None`` for GET requests
    body = None
    #: The HTTP headers
    headers = None
    #: The SAML ``RequestID``, only set for SAML requests
    request_id = None
    #: The SAML ``IssueInstant``, only set for SAML requests
    issue_instant = None

    def __init__(self, method, path, params, ticket, service, body=None, headers=None):
        if not ticket:
            raise ValueError("a ticket is required to build a validation request")
        if not service:
            raise ValueError("a service is required to build a validation request")
        if any(key == "ticket" for (key, _) in parse_qsl(urlparse(service).query)):
            raise ValueError("the service %r must not have a ticket parameter" % service)
        self.method = method
        self.path = path
        self.params = list(params)
        self.ticket = ticket
        self.service = service
        self.body = body
        self.headers = dict(headers or {})

    @property
    def query(self):
        """The url encoded query string"""
        return urlencode(self.params)

    @property
    def path_with_query(self):
        """The validation path with its query string"""
        return "%s?%s" % (self.path, self.query)

    def __repr__(self):
        return "<ValidationRequest %s %s>" % (self.method, self.path_with_query)


def build_cas1_request(ticket, service, validate_path=None):
    """
        Build a CAS 1.0 ``/validate`` request

        :param str ticket: The service ticket to validate
        :param str service: The service URL
        :param str validate_path: An optional validation path override
        :rtype: ValidationRequest
    """
    return ValidationRequest(
        "GET",
        validate_path or CAS1_VALIDATE_PATH,
        [('ticket', ticket), ('service', service)],
        ticket,
        service,
    )


def build_cas3_request(ticket, service, validate_path=None):
    """
        Build a CAS 3.0 ``/p3/serviceValidate`` request

        :param str ticket: The service ticket to validate
        :param str service: The service URL
        :param str validate_path: An optional validation path override
        :rtype: ValidationRequest
    """
    return ValidationRequest(
        "GET",
        validate_path or CAS3_VALIDATE_PATH,
        [('ticket', ticket), ('service', service)],
        ticket,
        service,
    )


def get_saml_assertion(ticket, request_id, timestamp):
    """
        http://www.jasig.org/cas/protocol#samlvalidate-cas-3.0

        SAML request values:

        RequestID [REQUIRED]:
            unique identifier for the request
        IssueInstant [REQUIRED]:
            timestamp of the request
        samlp:AssertionArtifact [REQUIRED]:
            the valid CAS Service Ticket obtained as a response parameter at login.

        :return: The SOAP envelope encoded in utf-8
        :rtype: bytes
    """
    return SAML_ASSERTION_TEMPLATE.format(
        request_id=escape(request_id),
        timestamp=escape(timestamp),
        ticket=escape(ticket),
    ).encode('utf8')


def build_saml_request(ticket, service, validate_path=None):
    """
        Build a CAS 3.0 SAML 1.1 ``/samlValidate`` request

        :param str ticket: The service ticket to validate
        :param str service: The service URL, sent as the ``TARGET`` parameter
        :param str validate_path: An optional validation path override
        :rtype: ValidationRequest
    """
    request_id = str(uuid4())
    # e.g. 2014-06-02T09:21:03.071189+00:00
    timestamp = timezone.now().isoformat()
    request = ValidationRequest(
        "POST",
        validate_path or SAML_VALIDATE_PATH,
        [('TARGET', service)],
        ticket,
        service,
        body=get_saml_assertion(ticket, request_id, timestamp),
        headers=SAML_HEADERS,
    )
    request.request_id = request_id
    request.issue_instant = timestamp
    return request
