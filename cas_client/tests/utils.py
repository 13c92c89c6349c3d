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
"""Some utils functions for tests"""
from http import server as BaseHTTPServer
from threading import Thread
from urllib.parse import urlparse, parse_qsl
from xml.sax.saxutils import escape, quoteattr

from lxml import etree

SERVICE_VALIDATE_SUCCESS = """<cas:serviceResponse xmlns:cas="http://www.yale.edu/tp/cas">
    <cas:authenticationSuccess>
        <cas:user>%(username)s</cas:user>
        <cas:attributes>
%(attributes)s
        </cas:attributes>
    </cas:authenticationSuccess>
</cas:serviceResponse>
"""

SERVICE_VALIDATE_FAILURE = """<cas:serviceResponse xmlns:cas="http://www.yale.edu/tp/cas">
    <cas:authenticationFailure code="%(code)s">
        %(msg)s
    </cas:authenticationFailure>
</cas:serviceResponse>
"""

SAML_VALIDATE_SUCCESS = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Header/>
  <SOAP-ENV:Body>
    <Response xmlns="urn:oasis:names:tc:SAML:1.0:protocol"
     xmlns:saml="urn:oasis:names:tc:SAML:1.0:assertion"
     xmlns:samlp="urn:oasis:names:tc:SAML:1.0:protocol"
     IssueInstant="2016-06-01T12:00:00Z" MajorVersion="1" MinorVersion="1"
     Recipient="%(recipient)s" ResponseID="_5f2a4c1d">
      <Status>
        <StatusCode Value="samlp:Success"></StatusCode>
      </Status>
      <Assertion xmlns="urn:oasis:names:tc:SAML:1.0:assertion" AssertionID="_e5c23ff7a3"
       IssueInstant="2016-06-01T12:00:00Z" Issuer="localhost" MajorVersion="1" MinorVersion="1">
        <Conditions NotBefore="2016-06-01T12:00:00Z" NotOnOrAfter="2016-06-01T12:01:00Z">
          <AudienceRestrictionCondition>
            <Audience>%(recipient)s</Audience>
          </AudienceRestrictionCondition>
        </Conditions>
        <AttributeStatement>
          <Subject>
            <NameIdentifier>%(username)s</NameIdentifier>
            <SubjectConfirmation>
              <ConfirmationMethod>urn:oasis:names:tc:SAML:1.0:cm:artifact</ConfirmationMethod>
            </SubjectConfirmation>
          </Subject>
%(attributes)s
        </AttributeStatement>
        <AuthenticationStatement AuthenticationInstant="2016-06-01T12:00:00Z"
         AuthenticationMethod="urn:oasis:names:tc:SAML:1.0:am:password">
          <Subject>
            <NameIdentifier>%(username)s</NameIdentifier>
            <SubjectConfirmation>
              <ConfirmationMethod>urn:oasis:names:tc:SAML:1.0:cm:artifact</ConfirmationMethod>
            </SubjectConfirmation>
          </Subject>
        </AuthenticationStatement>
      </Assertion>
    </Response>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>
"""

SAML_VALIDATE_FAILURE = """<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">
  <SOAP-ENV:Header/>
  <SOAP-ENV:Body>
    <Response xmlns="urn:oasis:names:tc:SAML:1.0:protocol"
     xmlns:saml="urn:oasis:names:tc:SAML:1.0:assertion"
     xmlns:samlp="urn:oasis:names:tc:SAML:1.0:protocol"
     IssueInstant="2016-06-01T12:00:00Z" MajorVersion="1" MinorVersion="1"
     ResponseID="_5f2a4c1d">
      <Status>
        <StatusCode Value="samlp:%(code)s"></StatusCode>
        <StatusMessage>%(msg)s</StatusMessage>
      </Status>
    </Response>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>
"""


def service_validate_success(username, attributes=None):
    """
        :param str username: The username
        :param list attributes: A list of ``(name, value)``
        :return: a CAS 3.0 ``authenticationSuccess`` response
    """
    return SERVICE_VALIDATE_SUCCESS % {
        'username': escape(username),
        'attributes': "\n".join(
            "            <cas:%s>%s</cas:%s>" % (name, escape(value), name)
            for (name, value) in (attributes or [])
        ),
    }


def service_validate_failure(code, msg=""):
    """:return: a CAS 3.0 ``authenticationFailure`` response"""
    return SERVICE_VALIDATE_FAILURE % {'code': code, 'msg': escape(msg)}


def saml_validate_success(username, attributes=None, recipient="https://www.example.com"):
    """
        :param str username: The username
        :param list attributes: A list of ``(name, [values])``
        :return: a SAML 1.1 validation response with status ``Success``
    """
    rendered_attributes = []
    for (name, values) in (attributes or []):
        rendered_attributes.append(
            '          <Attribute AttributeName=%s '
            'AttributeNamespace="http://www.ja-sig.org/products/cas/">\n%s\n'
            '          </Attribute>' % (
                quoteattr(name),
                "\n".join(
                    "            <AttributeValue>%s</AttributeValue>" % escape(value)
                    for value in values
                )
            )
        )
    return SAML_VALIDATE_SUCCESS % {
        'username': escape(username),
        'attributes': "\n".join(rendered_attributes),
        'recipient': escape(recipient),
    }


def saml_validate_failure(code="RequestDenied", msg=""):
    """:return: a SAML 1.1 validation response with a failure status"""
    return SAML_VALIDATE_FAILURE % {'code': code, 'msg': escape(msg)}


class DummySession(dict):
    """A minimal session object"""
    session_key = "test_session"

    def flush(self):
        self.clear()

    def cycle_key(self):
        pass


class DummyCAS(BaseHTTPServer.BaseHTTPRequestHandler):
    """A dummy CAS that validate for only one (service, ticket)"""

    #: dict of the last receive GET parameters
    params = None

    def test_params(self, service, ticket):
        """check that internal and provided (service, ticket) matches"""
        if (
            self.server.ticket is not None and
            service == self.server.service and
            ticket == self.server.ticket
        ):
            self.server.ticket = None
            return True
        else:
            return False

    def send_headers(self, code, content_type):
        """send http headers"""
        self.send_response(code)
        self.send_header("Content-type", content_type)
        self.end_headers()

    def record(self, body=None):
        """store the received request on the server for later inspection"""
        self.server.requests.append({
            'method': self.command,
            'path': urlparse(self.path).path,
            'params': self.params,
            'headers': dict(self.headers),
            'body': body,
        })

    def do_GET(self):
        """Called on a GET request on the BaseHTTPServer"""
        url = urlparse(self.path)
        self.params = dict(parse_qsl(url.query))
        self.record()
        valid = self.test_params(self.params.get("service"), self.params.get("ticket"))
        if url.path.endswith("/validate"):
            self.send_headers(200, "text/plain; charset=utf-8")
            if valid:
                self.wfile.write(b"yes\n" + self.server.username.encode("utf-8") + b"\n")
            else:
                self.wfile.write(b"no\n")
        elif url.path.endswith("/serviceValidate"):
            self.send_headers(200, "text/xml; charset=utf-8")
            if valid:
                body = service_validate_success(
                    self.server.username,
                    [(key, value) for (key, values) in self.server.attributes for value in values]
                )
            else:
                body = service_validate_failure(
                    'INVALID_TICKET',
                    'Valids are (%r, %r)' % (self.server.service, self.server.ticket)
                )
            self.wfile.write(body.encode("utf-8"))
        else:
            self.return_404()

    def do_POST(self):
        """Called on a POST request on the BaseHTTPServer"""
        url = urlparse(self.path)
        self.params = dict(parse_qsl(url.query))
        length = int(self.headers.get('content-length'))
        body = self.rfile.read(length)
        self.record(body)
        if url.path.endswith("/samlValidate"):
            self.send_headers(200, "text/xml; charset=utf-8")
            root = etree.fromstring(body)
            artifacts = root.xpath(
                "//samlp:AssertionArtifact",
                namespaces={'samlp': "urn:oasis:names:tc:SAML:1.0:protocol"}
            )
            ticket = artifacts[0].text if artifacts else None
            if self.test_params(self.params.get("TARGET"), ticket):
                response = saml_validate_success(
                    self.server.username,
                    self.server.attributes,
                    self.server.service
                )
            else:
                response = saml_validate_failure(
                    'RequestDenied',
                    'ticket %s not found' % ticket
                )
            self.wfile.write(response.encode("utf-8"))
        else:
            self.return_404()

    def return_404(self):
        """return a 404 error"""
        self.send_headers(404, "text/plain; charset=utf-8")
        self.wfile.write(b"not found")

    def log_message(self, *args):
        """silent any log message"""
        return

    @classmethod
    def run(cls, service, ticket, username, attributes=None, port=0):
        """
            Run a BaseHTTPServer using this class as handler. The server answers one request.

            :param list attributes: A list of ``(name, [values])``
        """
        server_class = BaseHTTPServer.HTTPServer
        httpd = server_class(("127.0.0.1", port), cls)
        httpd.service = service
        httpd.ticket = ticket
        httpd.username = username
        httpd.attributes = attributes or []
        httpd.requests = []
        (host, port) = httpd.socket.getsockname()[:2]

        def lauch():
            """routine to lauch in a background thread"""
            httpd.handle_request()
            httpd.server_close()

        httpd_thread = Thread(target=lauch)
        httpd_thread.daemon = True
        httpd_thread.start()
        return (httpd, host, port)


class VerifyRecorder(object):
    """A verify callback recording its calls and accepting every user"""

    def __init__(self, error=None, reject=False):
        self.calls = []
        self.error = error
        self.reject = reject

    def __call__(self, *args):
        self.calls.append(args[:-1])
        done = args[-1]
        profile = args[-1 - 1]
        if self.error is not None:
            return done(self.error)
        if self.reject:
            return done(None, False, {'message': 'rejected'})
        if isinstance(profile, dict):
            return done(None, profile.get("user"), {'profile': profile})
        return done(None, profile, {'profile': profile})
