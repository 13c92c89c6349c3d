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
"""HTTP transport of the validation requests"""
from .default_settings import settings

import logging
import requests
from concurrent.futures import ThreadPoolExecutor
from requests_futures.sessions import FuturesSession

#: logger facility
logger = logging.getLogger(__name__)


class Transport(object):
    """
        Send validation requests to the CAS server of ``config``

        :param cas_client.config.ClientConfig config: The client configuration. The plain or
            TLS transport is selected once from its scheme.
    """

    #: ``"http"`` or ``"https"``
    scheme = None
    #: ``scheme://host[:port]`` of the CAS server
    origin = None
    #: base path of the CAS server, without trailing slash
    base_path = None
    #: timeout of the requests in seconds
    timeout = None
    #: certificate verification for https, see ``requests``
    verify = None
    #: the :class:`requests_futures.sessions.FuturesSession` used by :meth:`submit`, created on
    #: the first call
    futures_session = None

    def __init__(self, config):
        self.scheme = config.scheme
        if config.port:
            self.origin = "%s://%s:%s" % (config.scheme, config.host, config.port)
        else:
            self.origin = "%s://%s" % (config.scheme, config.host)
        self.base_path = config.path
        self.timeout = config.timeout
        self.verify = config.verify_certificate if config.secure else False

    def get_futures_session(self):
        """
            :return: The futures session of the transport, its thread pool is only started
                then a request is submitted.
            :rtype: requests_futures.sessions.FuturesSession
        """
        if self.futures_session is None:
            self.futures_session = FuturesSession(
                executor=ThreadPoolExecutor(
                    max_workers=settings.CAS_VALIDATION_MAX_PARALLEL_REQUESTS
                )
            )
        return self.futures_session

    def url(self, validation_request):
        """
            :param cas_client.builders.ValidationRequest validation_request: A request
            :return: The absolute URL, with query string, of ``validation_request``
            :rtype: str
        """
        path = validation_request.path_with_query
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return "%s%s%s" % (self.origin, self.base_path, path)

    def request_kwargs(self, validation_request):
        """keyword arguments of the ``requests`` call sending ``validation_request``"""
        kwargs = {
            'headers': validation_request.headers,
            'timeout': self.timeout,
            'verify': self.verify,
        }
        if validation_request.body is not None:
            kwargs['data'] = validation_request.body
        return kwargs

    @staticmethod
    def read(response):
        """
            :param requests.Response response: A CAS server response
            :return: The whole response body decoded as utf-8
            :rtype: str
        """
        if response.status_code != 200:
            logger.warning(
                "CAS server answered with HTTP status %s to %s" % (
                    response.status_code,
                    response.url
                )
            )
        body = response.content.decode("utf-8", "replace")
        logger.debug("CAS server response body:\n%s" % body)
        return body

    def fetch(self, validation_request):
        """
            Send ``validation_request`` and wait for the response

            :param cas_client.builders.ValidationRequest validation_request: A request
            :return: The response body
            :rtype: str
            :raises requests.exceptions.RequestException: on connection failure
        """
        url = self.url(validation_request)
        logger.info("Sending validation request %s %s" % (validation_request.method, url))
        with requests.Session() as session:
            response = session.request(
                validation_request.method,
                url,
                **self.request_kwargs(validation_request)
            )
        return self.read(response)

    def submit(self, validation_request):
        """
            Send ``validation_request`` in a background thread

            :param cas_client.builders.ValidationRequest validation_request: A request
            :return: A future resolving to the :class:`requests.Response` or raising
                :class:`requests.exceptions.RequestException` on connection failure.
            :rtype: concurrent.futures.Future
        """
        url = self.url(validation_request)
        logger.info("Submitting validation request %s %s" % (validation_request.method, url))
        return self.get_futures_session().request(
            validation_request.method,
            url,
            **self.request_kwargs(validation_request)
        )
