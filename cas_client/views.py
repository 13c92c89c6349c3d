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
"""views for the app"""
from .default_settings import settings

from django.contrib import auth
from django.contrib.auth.base_user import AbstractBaseUser
from django.http import HttpResponseRedirect, HttpResponseForbidden
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.generic import View

import logging

from .strategy import CASStrategy, Redirect, Succeeded, Failed

logger = logging.getLogger(__name__)


class StrategyMixin(object):
    """give access to the CAS strategy"""

    #: A :class:`CASStrategy<cas_client.strategy.CASStrategy>` instance. If ``None``, the
    #: strategy is built from the settings on each request.
    strategy = None

    def get_strategy(self):
        """
            :return: The CAS strategy to use
            :rtype: cas_client.strategy.CASStrategy
        """
        if self.strategy is not None:
            return self.strategy
        return CASStrategy.from_settings()


class LoginView(StrategyMixin, View):
    """redirect to the CAS and validate the returned ticket"""

    #: Extra parameters added to the CAS login URL, ignored if false
    login_params = None

    @staticmethod
    def get_redirect_url(request):
        """
            :param django.http.HttpRequest request: The current request object
            :return: The ``next`` GET parameter if it is safe, else ``settings.CAS_REDIRECT_URL``
            :rtype: str
        """
        next_url = request.GET.get("next")
        if next_url and url_has_allowed_host_and_scheme(
            next_url,
            allowed_hosts={request.get_host()},
            require_https=request.is_secure()
        ):
            return next_url
        return settings.CAS_REDIRECT_URL

    def get(self, request, *args, **kwargs):
        """
            method called on GET request on this view

            :param django.http.HttpRequest request: The current request object
            :return: a redirection to the CAS (login or front channel logout) or, after the
                ticket validation, to the ``next`` URL. A 403 error if the authentication
                failed.
            :rtype: django.http.HttpResponse
        """
        result = self.get_strategy().authenticate(request, login_params=self.login_params)
        if isinstance(result, Redirect):
            return HttpResponseRedirect(result.url)
        if isinstance(result, Succeeded):
            if isinstance(result.user, AbstractBaseUser):
                auth.login(request, result.user, backend=settings.CAS_LOGIN_BACKEND)
            logger.info("User %s logged in" % result.user)
            return HttpResponseRedirect(self.get_redirect_url(request))
        if isinstance(result, Failed):
            return HttpResponseForbidden(result.message or "Authentication failed")
        logger.error("CAS authentication error: %s" % result.error)
        if isinstance(result.error, Exception):
            raise result.error
        raise RuntimeError(result.error)


class LogoutView(StrategyMixin, View):
    """destroy the local session and redirect to the CAS logout page"""

    def get(self, request, *args, **kwargs):
        """
            method called on GET request on this view

            :param django.http.HttpRequest request: The current request object
            :return: a redirection to the CAS logout page
            :rtype: django.http.HttpResponseRedirect
        """
        strategy = self.get_strategy()
        logger.info("logout requested")
        strategy.logout_local(request)
        return HttpResponseRedirect(strategy.get_logout_url(settings.CAS_LOGOUT_REDIRECT_URL))
