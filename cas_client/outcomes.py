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
"""Results of one ticket validation attempt"""


class ValidationOutcome(object):
    """Base class of the result of a ticket validation"""

    #: ``True`` only for :class:`Success`
    success = False

    def message(self):
        """
            :return: A human readable description of the outcome
            :rtype: str
        """
        raise NotImplementedError()

    def __repr__(self):
        return "<%s: %s>" % (self.__class__.__name__, self.message())


class Success(ValidationOutcome):
    """
        The CAS server validated the ticket

        :param str identity: The user identifier returned by the CAS server
        :param dict attributes: The user attributes, mapping a name to a string or a list of
            strings.
        :param profile: What is passed to the verify callback. Default to ``identity``.
    """
    success = True

    #: The user identifier returned by the CAS server
    identity = None
    #: The user attributes
    attributes = None
    #: The object passed to the verify callback
    profile = None

    def __init__(self, identity, attributes=None, profile=None):
        self.identity = identity
        self.attributes = attributes if attributes is not None else {}
        self.profile = profile if profile is not None else identity

    def message(self):
        return "ticket validated for user %s" % self.identity


class ProtocolFailure(ValidationOutcome):
    """
        The CAS server explicitly rejected the ticket

        :param str code: The error code returned by the CAS server, if any
        :param str msg: An optional detail message
    """

    #: The error code returned by the CAS server
    code = None
    #: The detail message
    msg = None

    def __init__(self, code=None, msg=""):
        self.code = code
        self.msg = msg

    def message(self):
        if self.code:
            return "Authentication failed %s" % self.code
        return "Authentication failed"


class MalformedResponse(ValidationOutcome):
    """
        The CAS server response did not match the expected grammar

        :param str reason: Why the response was rejected
    """

    #: Why the response was rejected
    reason = None

    def __init__(self, reason=""):
        self.reason = reason

    def message(self):
        return "The response from the server was bad"


class TransportError(ValidationOutcome):
    """
        The validation request could not be sent or its response could not be read

        :param Exception cause: The underlying exception
    """

    #: The underlying exception
    cause = None

    def __init__(self, cause):
        self.cause = cause

    def message(self):
        return "Unable to reach the CAS server: %s" % self.cause
