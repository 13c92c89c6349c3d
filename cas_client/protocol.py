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
"""CAS protocol variants: how to build a validation request and parse its response"""
from . import builders
from . import parsers
from .config import CAS1, CAS3, CAS3_SAML, ConfigurationError


class CASProtocol(object):
    """
        Return the protocol variant matching ``config.protocol``

        :param cas_client.config.ClientConfig config: The client configuration
        :raises ConfigurationError: if the protocol is not supported
    """
    def __new__(cls, config):
        protocol = config.protocol
        if protocol == CAS1:
            return CASProtocolV1(config)
        elif protocol == CAS3:
            return CASProtocolV3(config)
        elif protocol == CAS3_SAML:
            return CASProtocolV3SAML(config)
        raise ConfigurationError('Unsupported CAS protocol %r' % protocol)


class CASProtocolBase(object):
    """
        Base class of the protocol variants

        :param cas_client.config.ClientConfig config: The client configuration
    """

    #: The protocol tag
    protocol = None
    #: The version default validation path
    default_validate_path = None
    #: Name of the logout parameter holding the URL to redirect to after logout
    logout_redirect_param_name = 'service'
    #: The validation path used, :attr:`default_validate_path` unless overridden
    validate_path = None

    def __init__(self, config):
        # an explicit validate URL always overrides the version default path
        self.validate_path = config.validate_url or self.default_validate_path

    def build_request(self, ticket, service):
        """
            :param str ticket: The service ticket to validate
            :param str service: The service URL
            :rtype: cas_client.builders.ValidationRequest
        """
        raise NotImplementedError()

    def parse_response(self, body):
        """
            :param str body: The validation response body
            :rtype: cas_client.outcomes.ValidationOutcome
        """
        raise NotImplementedError()


class CASProtocolV1(CASProtocolBase):
    """CAS 1.0, plain text validation"""
    protocol = CAS1
    default_validate_path = builders.CAS1_VALIDATE_PATH
    logout_redirect_param_name = 'url'

    def build_request(self, ticket, service):
        return builders.build_cas1_request(ticket, service, self.validate_path)

    def parse_response(self, body):
        return parsers.parse_cas1_response(body)


class CASProtocolV3(CASProtocolBase):
    """CAS 3.0, XML validation"""
    protocol = CAS3
    default_validate_path = builders.CAS3_VALIDATE_PATH

    def build_request(self, ticket, service):
        return builders.build_cas3_request(ticket, service, self.validate_path)

    def parse_response(self, body):
        return parsers.parse_cas3_response(body)


class CASProtocolV3SAML(CASProtocolBase):
    """CAS 3.0 with SAML 1.1 validation"""
    protocol = CAS3_SAML
    default_validate_path = builders.SAML_VALIDATE_PATH

    def build_request(self, ticket, service):
        return builders.build_saml_request(ticket, service, self.validate_path)

    def parse_response(self, body):
        return parsers.parse_saml_response(body)
