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
# (c) 2015-2016 Valentin Samir
"""Default values for the app's settings"""
from django.conf import settings


#: Base URL of the CAS server, for instance ``https://cas.example.com/cas``. The login, logout
#: and validation endpoints are computed relatively to this URL. Its scheme must be ``http`` or
#: ``https``.
CAS_SERVER_URL = None
#: Base URL of this application, used to compute the service URL sent to the CAS from the
#: path of the current request, for instance ``https://app.example.com``.
CAS_SERVER_BASE_URL = None
#: An optional fixed service URL. If not set, the service URL is the path of the current
#: request resolved against :obj:`CAS_SERVER_BASE_URL`.
CAS_SERVICE_URL = None
#: An optional validation path (or absolute URL) overriding the default path of
#: :obj:`CAS_VERSION`.
CAS_VALIDATE_URL = None
#: The CAS protocol version used to validate tickets. Must be one of ``"CAS1.0"``
#: or ``"CAS3.0"``.
CAS_VERSION = "CAS1.0"
#: If ``True``, validate tickets with the SAML 1.1 ``/samlValidate`` endpoint.
#: Only valid with :obj:`CAS_VERSION` set to ``"CAS3.0"``.
CAS_USE_SAML = False
#: If ``True``, the current :class:`django.http.HttpRequest` is the first argument passed
#: to the verify callback.
CAS_PASS_REQUEST_TO_CALLBACK = False
#: Extra parameters appended to the CAS login URL, for instance ``{"renew": "true"}`` or
#: ``{"gateway": "true"}``. Parameters with a false value are ignored.
CAS_LOGIN_PARAMS = {}
#: Timeout in seconds of the validation request sent to the CAS server.
CAS_VALIDATION_TIMEOUT = 10
#: Path to certificate authorities file. Usually on linux the local CAs are in
#: /etc/ssl/certs/ca-certificates.crt. ``True`` tell requests to use its internal certificat
#: authorities.
CAS_CA_CERTIFICATE_PATH = True
#: Maximum number of parallel validation requests send by
#: :meth:`cas_client.strategy.CASStrategy.authenticate_async`.
#: if more requests need to be send, there are queued
CAS_VALIDATION_MAX_PARALLEL_REQUESTS = 10
#: A dotted path to a callable receiving ``(profile, done)`` (or ``(request, profile, done)``
#: if :obj:`CAS_PASS_REQUEST_TO_CALLBACK` is ``True``) and calling ``done(error, user, info)``.
CAS_VERIFY_CALLBACK = 'cas_client.auth.DjangoUserVerify'
#: The django authentication backend recorded in the session then a user is logged in.
CAS_LOGIN_BACKEND = 'django.contrib.auth.backends.ModelBackend'
#: Where to redirect users after a successful login if no ``next`` parameter is given.
CAS_REDIRECT_URL = '/'
#: Where the CAS should redirect users after they logged out. Let it to ``None`` to stay on the
#: CAS logout page.
CAS_LOGOUT_REDIRECT_URL = None
#: The key in the session under which :class:`cas_client.state.SessionStateStore` stores
#: the state.
CAS_STATE_SESSION_KEY = 'cas_client'


GLOBALS = globals().copy()
for name, default_value in GLOBALS.items():
    # only care about parameter begining by CAS_
    if name.startswith("CAS_"):
        # get the current setting value, falling back to default_value
        value = getattr(settings, name, default_value)
        # set the setting value to its value if defined, ellse to the default_value.
        setattr(settings, name, value)
