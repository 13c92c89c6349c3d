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
"""Session based state store for token exchange flows"""
from .default_settings import settings

from . import utils
from .config import ConfigurationError

#: length of the generated states
STATE_LEN = 24


class StateError(Exception):
    """Raised then the request has no session"""
    pass


class SessionStateStore(object):
    """
        Generate a random state, store it in the session and verify it when the user is
        redirected back to the application.

        :param str key: The key in the session under which to store the state. Default to
            ``settings.CAS_STATE_SESSION_KEY``.
        :raises ConfigurationError: if ``key`` is empty
    """

    #: The session key
    key = None

    def __init__(self, key=None):
        if key is None:
            key = settings.CAS_STATE_SESSION_KEY
        if not key:
            raise ConfigurationError("Session-based state store requires a session key")
        self.key = key

    @staticmethod
    def get_session(request):
        """
            :param django.http.HttpRequest request: The current request object
            :return: The session of ``request``
            :raises StateError: if the request has no session
        """
        session = getattr(request, "session", None)
        if session is None:
            raise StateError(
                "Authentication requires session support when using state. "
                "Did you forget the SessionMiddleware?"
            )
        return session

    def store(self, request):
        """
            Generate a new state and store it in the session

            :param django.http.HttpRequest request: The current request object
            :return: The generated state
            :rtype: str
        """
        session = self.get_session(request)
        state = utils.gen_state(STATE_LEN)
        data = dict(session.get(self.key) or {})
        data["state"] = state
        session[self.key] = data
        return state

    def verify(self, request, provided_state):
        """
            Compare ``provided_state`` to the state stored in the session. The stored state is
            consumed.

            :param django.http.HttpRequest request: The current request object
            :param str provided_state: The state received from the provider
            :return: ``(True, None)`` if the states match, ``(False, info)`` otherwise
            :rtype: tuple
        """
        session = self.get_session(request)
        data = session.get(self.key)
        if not data or not data.get("state"):
            return (False, {'message': 'Unable to verify authorization request state.'})

        data = dict(data)
        state = data.pop("state")
        if data:
            session[self.key] = data
        else:
            del session[self.key]

        if state != provided_state:
            return (False, {'message': 'Invalid authorization request state.'})
        return (True, None)
