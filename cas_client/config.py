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
"""CAS client configuration"""
from .default_settings import settings

from django.core.exceptions import ImproperlyConfigured

from collections import namedtuple
from urllib.parse import urlparse

#: CAS 1.0 plain text validation
CAS1 = "CAS1"
#: CAS 3.0 XML validation
CAS3 = "CAS3"
#: CAS 3.0 SAML 1.1 validation
CAS3_SAML = "CAS3_SAML"

#: Supported values of the ``version`` parameter
VERSIONS = ("CAS1.0", "CAS3.0")


class ConfigurationError(ImproperlyConfigured):
    """Raised at construction time then the CAS client configuration is not usable"""
    pass


_ClientConfigBase = namedtuple("_ClientConfigBase", [
    "cas_server_url", "scheme", "host", "port", "path",
    "server_base_url", "service_url", "validate_url",
    "version", "use_saml", "pass_request_to_callback",
    "login_params", "timeout", "verify_certificate",
])


class ClientConfig(_ClientConfigBase):
    """
        Immutable configuration of a CAS client

        :param str cas_server_url: The CAS server base URL. Its scheme must be http or https.
        :param str server_base_url: The application base URL used to compute the service URL.
        :param str service_url: An optional fixed service URL.
        :param str validate_url: An optional override of the version default validation path.
        :param str version: ``"CAS1.0"`` or ``"CAS3.0"``.
        :param bool use_saml: Use the SAML 1.1 validation, only valid with ``"CAS3.0"``.
        :param bool pass_request_to_callback: Pass the current request to the verify callback.
        :param dict login_params: Extra parameters added to the CAS login URL.
        :param timeout: The timeout in seconds of the validation request.
        :param verify_certificate: A CA bundle path or a :class:`bool`, see ``requests``.
        :param str sso_base_url: An alias of ``cas_server_url``.
        :raises ConfigurationError: if the configuration is not valid
    """
    __slots__ = ()

    def __new__(cls, cas_server_url=None, server_base_url=None, service_url=None,
                validate_url=None, version="CAS1.0", use_saml=False,
                pass_request_to_callback=False, login_params=None, timeout=None,
                verify_certificate=True, sso_base_url=None):
        cas_server_url = cas_server_url or sso_base_url
        if not cas_server_url:
            raise ConfigurationError("The CAS client requires a CAS server URL")
        parsed = urlparse(cas_server_url)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ConfigurationError(
                "The CAS server URL %r must be an absolute http or https URL" % cas_server_url
            )
        try:
            port = parsed.port
        except ValueError:
            raise ConfigurationError("The CAS server URL %r has an invalid port" % cas_server_url)
        if version not in VERSIONS:
            raise ConfigurationError("unsupported version %r" % (version,))
        if use_saml and version != "CAS3.0":
            raise ConfigurationError("SAML validation is only available with CAS3.0")
        if not server_base_url and not (service_url and urlparse(service_url).scheme):
            raise ConfigurationError(
                "The CAS client requires a server base URL to compute the service URL"
            )
        return super(ClientConfig, cls).__new__(
            cls,
            cas_server_url=cas_server_url.rstrip("/"),
            scheme=parsed.scheme,
            host=parsed.hostname,
            port=port,
            path=parsed.path.rstrip("/"),
            server_base_url=server_base_url,
            service_url=service_url,
            validate_url=validate_url,
            version=version,
            use_saml=bool(use_saml),
            pass_request_to_callback=bool(pass_request_to_callback),
            login_params=dict(login_params or {}),
            timeout=timeout,
            verify_certificate=verify_certificate,
        )

    @property
    def protocol(self):
        """
            :return: One of :obj:`CAS1`, :obj:`CAS3` or :obj:`CAS3_SAML`
            :rtype: str
        """
        if self.version == "CAS1.0":
            return CAS1
        if self.use_saml:
            return CAS3_SAML
        return CAS3

    @property
    def secure(self):
        """``True`` if the validation requests are sent over TLS"""
        return self.scheme == "https"

    @classmethod
    def from_settings(cls):
        """
            :return: A configuration built from the ``CAS_*`` django settings
            :rtype: ClientConfig
        """
        return cls(
            cas_server_url=settings.CAS_SERVER_URL,
            server_base_url=settings.CAS_SERVER_BASE_URL,
            service_url=settings.CAS_SERVICE_URL,
            validate_url=settings.CAS_VALIDATE_URL,
            version=settings.CAS_VERSION,
            use_saml=settings.CAS_USE_SAML,
            pass_request_to_callback=settings.CAS_PASS_REQUEST_TO_CALLBACK,
            login_params=settings.CAS_LOGIN_PARAMS,
            timeout=settings.CAS_VALIDATION_TIMEOUT,
            verify_certificate=settings.CAS_CA_CERTIFICATE_PATH,
        )
