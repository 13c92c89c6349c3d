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
"""The CAS authentication strategy"""
from .default_settings import settings

from django.contrib import auth

import logging
import pprint
import requests
from concurrent.futures import Future
from urllib.parse import urlencode

from . import utils
from .config import ClientConfig, ConfigurationError
from .outcomes import TransportError
from .protocol import CASProtocol
from .transport import Transport

#: logger facility
logger = logging.getLogger(__name__)


class AuthenticationResult(object):
    """Base class of the result of :meth:`CASStrategy.authenticate`"""
    pass


class Redirect(AuthenticationResult):
    """
        The user agent must be redirected

        :param str url: The absolute URL to redirect to
    """

    #: The absolute URL to redirect to
    url = None

    def __init__(self, url):
        self.url = url

    def __repr__(self):
        return "<Redirect: %s>" % self.url


class Succeeded(AuthenticationResult):
    """
        The ticket was validated and the verify callback accepted the user

        :param user: The user returned by the verify callback
        :param info: The optional info returned by the verify callback
    """

    #: The user returned by the verify callback
    user = None
    #: The info returned by the verify callback
    info = None

    def __init__(self, user, info=None):
        self.user = user
        self.info = info

    def __repr__(self):
        return "<Succeeded: %r>" % (self.user,)


class Failed(AuthenticationResult):
    """
        The authentication failed: the ticket is not valid, the CAS response was not
        understood or the verify callback rejected the user.

        :param info: Information about the failure, usually a :class:`dict` with a
            ``"message"`` key.
    """

    #: Information about the failure
    info = None

    def __init__(self, info=None):
        self.info = info

    @property
    def message(self):
        """The failure message, if any"""
        if isinstance(self.info, dict):
            return self.info.get("message")
        if self.info is not None:
            return str(self.info)
        return None

    def __repr__(self):
        return "<Failed: %r>" % (self.info,)


class Errored(AuthenticationResult):
    """
        The authentication could not be performed

        :param Exception error: The error
    """

    #: The error
    error = None

    def __init__(self, error):
        self.error = error

    def __repr__(self):
        return "<Errored: %r>" % (self.error,)


class CASStrategy(object):
    """
        Authenticate requests against a CAS server

        :param cas_client.config.ClientConfig config: The client configuration
        :param verify: A callable receiving ``(profile, done)``, or
            ``(request, profile, done)`` if ``config.pass_request_to_callback`` is ``True``.
            It must call ``done(error, user, info)`` before returning.
        :raises ConfigurationError: if ``verify`` is not callable
    """

    #: name of the strategy
    name = 'cas'
    #: The client configuration
    config = None
    #: The protocol variant selected from the configuration
    protocol = None
    #: The transport used to send validation requests
    transport = None

    def __init__(self, config, verify):
        if not callable(verify):
            raise ConfigurationError("cas authentication strategy requires a verify function")
        self.config = config
        self.protocol = CASProtocol(config)
        self.transport = Transport(config)
        self._verify = verify

    @classmethod
    def from_settings(cls, verify=None):
        """
            Build a strategy from the ``CAS_*`` django settings

            :param verify: An optional verify callable, default to an instance (or the result of
                the call) of the object pointed by ``settings.CAS_VERIFY_CALLBACK``
            :rtype: CASStrategy
        """
        if verify is None and settings.CAS_VERIFY_CALLBACK:
            verify = utils.import_attr(settings.CAS_VERIFY_CALLBACK)
            if isinstance(verify, type):
                verify = verify()
        return cls(ClientConfig.from_settings(), verify)

    def service(self, request):
        """
            Compute the service URL of ``request``

            :param django.http.HttpRequest request: The current request object
            :return: The configured service URL, or the current request URL, resolved against
                the server base URL and without any ``ticket`` parameter.
            :rtype: str
        """
        return utils.resolve_service_url(
            self.config.server_base_url,
            self.config.service_url or request.get_full_path()
        )

    def get_login_url(self, service, login_params=None):
        """
            Generates the CAS login URL

            :param str service: The service URL
            :param dict login_params: Extra parameters to add to the login URL. Parameters with
                a false value are ignored.
            :rtype: str
        """
        params = {'service': service}
        for extra_params in (self.config.login_params, login_params or {}):
            for (key, value) in extra_params.items():
                if value:
                    params[key] = value
        return "%s/login?%s" % (self.config.cas_server_url, urlencode(list(params.items())))

    def get_logout_url(self, redirect_url=None):
        """
            Generates the CAS logout URL

            :param str redirect_url: An optional URL the CAS should redirect to after logout
            :rtype: str
        """
        return utils.update_url(
            "%s/logout" % self.config.cas_server_url,
            {self.protocol.logout_redirect_param_name: redirect_url or None}
        )

    def get_relay_logout_url(self, relay_state):
        """
            Generates the URL continuing a front channel single logout

            :param str relay_state: The ``RelayState`` received from the CAS
            :rtype: str
        """
        params = [('_eventId', 'next'), ('RelayState', relay_state)]
        return "%s/logout?%s" % (self.config.cas_server_url, urlencode(params))

    @staticmethod
    def logout_local(request):
        """
            destroy the local session of ``request``

            :param django.http.HttpRequest request: The current request object
        """
        if hasattr(request, "session"):
            auth.logout(request)

    def route(self, request, login_params=None):
        """
            Decide what to do with ``request`` before any ticket validation

            :param django.http.HttpRequest request: The current request object
            :param dict login_params: Extra parameters to add to the login URL
            :return: A tuple ``(result, ticket, service)``. ``result`` is a :class:`Redirect`
                if no validation is needed, ``None`` otherwise.
            :rtype: tuple
        """
        # CAS front channel single sign out, the CAS bounces the user agent through each
        # application then continues the relay chain.
        relay_state = request.GET.get('RelayState')
        if relay_state:
            logger.info("Front channel logout requested, continuing the relay chain")
            self.logout_local(request)
            return (Redirect(self.get_relay_logout_url(relay_state)), None, None)

        service = self.service(request)
        ticket = request.GET.get('ticket')
        if not ticket:
            logger.info("No ticket, redirecting to the CAS login page for service %s" % service)
            return (Redirect(self.get_login_url(service, login_params)), None, service)
        return (None, ticket, service)

    def validate(self, ticket, service):
        """
            Validate ``ticket`` for ``service`` against the CAS server

            :param str ticket: The service ticket
            :param str service: The service URL
            :rtype: cas_client.outcomes.ValidationOutcome
        """
        validation_request = self.protocol.build_request(ticket, service)
        try:
            body = self.transport.fetch(validation_request)
        except requests.exceptions.RequestException as error:
            return TransportError(error)
        return self.protocol.parse_response(body)

    def verify(self, request, profile):
        """
            Call the verify callback

            :param django.http.HttpRequest request: The current request object
            :param profile: The profile of a successful validation
            :return: The three-way result of the verify callback
            :rtype: AuthenticationResult
        """
        results = []

        def done(error=None, user=None, info=None):
            """completion callback of the verify callable"""
            if error:
                results.append(Errored(error))
            elif not user:
                results.append(Failed(info))
            else:
                results.append(Succeeded(user, info))

        if self.config.pass_request_to_callback:
            self._verify(request, profile, done)
        else:
            self._verify(profile, done)
        if not results:
            return Errored(RuntimeError("the verify callback returned without calling done"))
        return results[0]

    def complete(self, request, service, outcome):
        """
            Map a validation outcome to the host three-way contract

            :param django.http.HttpRequest request: The current request object
            :param str service: The service URL
            :param cas_client.outcomes.ValidationOutcome outcome: The validation outcome
            :rtype: AuthenticationResult
        """
        if outcome.success:
            logger.info("Ticket validated, user %s authenticated on service %s" % (
                outcome.identity,
                service
            ))
            logger.debug("User attributes are:\n%s" % pprint.pformat(outcome.attributes))
            return self.verify(request, outcome.profile)
        if isinstance(outcome, TransportError):
            logger.error("Unable to validate ticket for service %s: %s" % (service, outcome.cause))
            return Errored(outcome.cause)
        logger.warning("Ticket validation failed for service %s: %s" % (
            service,
            outcome.message()
        ))
        return Failed({'message': outcome.message()})

    def authenticate(self, request, login_params=None):
        """
            Authenticate ``request``

            :param django.http.HttpRequest request: The current request object
            :param dict login_params: Extra parameters to add to the login URL
            :return: A :class:`Redirect`, :class:`Succeeded`, :class:`Failed` or
                :class:`Errored` instance
            :rtype: AuthenticationResult
        """
        (result, ticket, service) = self.route(request, login_params)
        if result is not None:
            return result
        return self.complete(request, service, self.validate(ticket, service))

    def authenticate_async(self, request, login_params=None):
        """
            Same as :meth:`authenticate` but the validation request is sent in a background
            thread.

            :param django.http.HttpRequest request: The current request object
            :param dict login_params: Extra parameters to add to the login URL
            :return: A future resolving to an :class:`AuthenticationResult`
            :rtype: concurrent.futures.Future
        """
        future = Future()
        (result, ticket, service) = self.route(request, login_params)
        if result is not None:
            future.set_result(result)
            return future

        def on_response(http_future):
            """called then the validation response is received"""
            try:
                try:
                    body = self.transport.read(http_future.result())
                except requests.exceptions.RequestException as error:
                    outcome = TransportError(error)
                else:
                    outcome = self.protocol.parse_response(body)
                future.set_result(self.complete(request, service, outcome))
            except Exception as error:
                future.set_exception(error)

        validation_request = self.protocol.build_request(ticket, service)
        self.transport.submit(validation_request).add_done_callback(on_response)
        return future
