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
"""Some verify callbacks for the CAS strategy"""
from django.contrib.auth import get_user_model
from django.db import DatabaseError

import logging

#: logger facility
logger = logging.getLogger(__name__)


class VerifyUser(object):
    """
        Verify callback base class. Instances are called with ``(profile, done)``.
    """

    @staticmethod
    def get_username(profile):
        """
            :param profile: The profile of a successful validation: a username (CAS 1.0),
                the ``authenticationSuccess`` element as a :class:`dict` (CAS 3.0) or a
                :class:`dict` with the keys ``user`` and ``attributes`` (SAML).
            :return: The username within ``profile``
            :rtype: str
        """
        if isinstance(profile, dict):
            return profile.get("user")
        return profile

    @staticmethod
    def get_attributes(profile):
        """
            :param profile: The profile of a successful validation
            :return: The user attributes within ``profile``
            :rtype: dict
        """
        if isinstance(profile, dict) and isinstance(profile.get("attributes"), dict):
            return profile["attributes"]
        return {}

    def get_user(self, username, attributes):
        """
            :param str username: The username returned by the CAS
            :param dict attributes: The attributes returned by the CAS
            :return: A user or ``None`` to reject the authentication

            raises NotImplementedError: always. The method need to be implemented by subclasses
        """
        raise NotImplementedError()

    def __call__(self, profile, done):
        username = self.get_username(profile)
        if not username:
            return done(None, None, {'message': 'No username in the CAS response'})
        attributes = self.get_attributes(profile)
        try:
            user = self.get_user(username, attributes)
        except DatabaseError as error:
            logger.error("Unable to fetch the user %s: %s" % (username, error))
            return done(error)
        if user is None:
            return done(None, None, {'message': 'User %s not allowed' % username})
        return done(None, user, {'attributes': attributes})


class DjangoUserVerify(VerifyUser):
    """
        Get or create the django user named by the CAS username
    """

    def get_user(self, username, attributes):
        """
            :param str username: The username returned by the CAS
            :param dict attributes: The attributes returned by the CAS
            :return: The django user named ``username``, created if it does not exist yet,
                or ``None`` if the user is inactive.
        """
        user_model = get_user_model()
        user, created = user_model.objects.get_or_create(
            **{user_model.USERNAME_FIELD: username}
        )
        if created:
            logger.info("Created django user %s" % username)
        if not user.is_active:
            logger.warning("Django user %s is inactive" % username)
            return None
        return user
