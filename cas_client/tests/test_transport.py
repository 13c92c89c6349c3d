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
"""Tests module for the HTTP transport"""
from django.test import TestCase

import mock
import requests

from cas_client import builders
from cas_client.config import ClientConfig
from cas_client.transport import Transport


class TransportTestCase(TestCase):
    """Tests for the Transport class"""

    def get_transport(self, cas_server_url="https://cas.example.com:8443/cas/", **kwargs):
        """return a transport for a configuration updated by kwargs"""
        return Transport(
            ClientConfig(
                cas_server_url=cas_server_url,
                server_base_url="https://app.example.com",
                **kwargs
            )
        )

    @staticmethod
    def get_response(content, status_code=200):
        """return a mocked requests response"""
        response = mock.Mock()
        response.status_code = status_code
        response.content = content
        response.url = "https://cas.example.com/validate"
        return response

    def test_url(self):
        """the url is made of the origin, the base path and the validation path"""
        transport = self.get_transport()
        request = builders.build_cas1_request("ST-1", "https://app.example.com/")
        self.assertEqual(
            transport.url(request),
            "https://cas.example.com:8443/cas/validate?ticket=ST-1&"
            "service=https%3A%2F%2Fapp.example.com%2F"
        )
        transport = self.get_transport("http://cas.example.com")
        self.assertEqual(transport.origin, "http://cas.example.com")
        self.assertEqual(
            transport.url(builders.build_cas3_request("ST-1", "https://app.example.com/", "p3")),
            "http://cas.example.com/p3?ticket=ST-1&service=https%3A%2F%2Fapp.example.com%2F"
        )

    def test_url_absolute_validate_url(self):
        """an absolute validation url is used as is"""
        transport = self.get_transport()
        request = builders.build_cas1_request(
            "ST-1",
            "https://app.example.com/",
            "https://other.example.com/validate"
        )
        self.assertEqual(
            transport.url(request),
            "https://other.example.com/validate?ticket=ST-1&"
            "service=https%3A%2F%2Fapp.example.com%2F"
        )

    def test_verify(self):
        """the certificate is only checked over https"""
        self.assertTrue(self.get_transport().verify)
        self.assertEqual(
            self.get_transport(verify_certificate="/etc/ssl/ca.pem").verify,
            "/etc/ssl/ca.pem"
        )
        self.assertFalse(self.get_transport("http://cas.example.com").verify)

    def test_read(self):
        """the body is decoded as utf-8 whatever the status code"""
        self.assertEqual(
            Transport.read(self.get_response("yes\nbéb\n".encode("utf-8"))),
            "yes\nbéb\n"
        )
        self.assertEqual(Transport.read(self.get_response(b"no\n", 500)), "no\n")
        self.assertEqual(Transport.read(self.get_response(b"yes\n\xff\n")), "yes\n�\n")

    def test_fetch_get(self):
        """fetch send a GET request with the timeout and the verify flag"""
        transport = self.get_transport(timeout=5)
        request = builders.build_cas1_request("ST-1", "https://app.example.com/")
        with mock.patch("requests.Session.request") as session_request:
            session_request.return_value = self.get_response(b"yes\nbob\n")
            self.assertEqual(transport.fetch(request), "yes\nbob\n")
        session_request.assert_called_once_with(
            "GET",
            transport.url(request),
            headers={},
            timeout=5,
            verify=True
        )

    def test_fetch_post(self):
        """fetch send the SAML body and headers"""
        transport = self.get_transport()
        request = builders.build_saml_request("ST-1", "https://app.example.com/")
        with mock.patch("requests.Session.request") as session_request:
            session_request.return_value = self.get_response(b"<a/>")
            transport.fetch(request)
        (args, kwargs) = session_request.call_args
        self.assertEqual(args[0], "POST")
        self.assertEqual(kwargs["data"], request.body)
        self.assertEqual(kwargs["headers"], builders.SAML_HEADERS)

    def test_fetch_error(self):
        """connection errors are propagated"""
        transport = self.get_transport()
        request = builders.build_cas1_request("ST-1", "https://app.example.com/")
        with mock.patch("requests.Session.request") as session_request:
            session_request.side_effect = requests.exceptions.ConnectionError("refused")
            with self.assertRaises(requests.exceptions.RequestException):
                transport.fetch(request)
        self.assertEqual(session_request.call_count, 1)

    def test_submit(self):
        """submit use the futures session"""
        transport = self.get_transport()
        request = builders.build_cas1_request("ST-1", "https://app.example.com/")
        with mock.patch.object(transport.get_futures_session(), "request") as futures_request:
            transport.submit(request)
        futures_request.assert_called_once_with(
            "GET",
            transport.url(request),
            headers={},
            timeout=None,
            verify=True
        )

    def test_futures_session_lazy(self):
        """no thread pool is started until a request is submitted, then it is reused"""
        transport = self.get_transport()
        self.assertIsNone(transport.futures_session)
        request = builders.build_cas1_request("ST-1", "https://app.example.com/")
        with mock.patch("requests.Session.request") as session_request:
            session_request.return_value = self.get_response(b"yes\nbob\n")
            transport.fetch(request)
        self.assertIsNone(transport.futures_session)
        futures_session = transport.get_futures_session()
        self.assertIsNotNone(futures_session)
        self.assertIs(transport.get_futures_session(), futures_session)
