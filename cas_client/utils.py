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
"""Some util function for the app"""
import random
import string

from importlib import import_module
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode, urljoin

from lxml import etree


#: 62 characters in the ascii range that can be used in URLs without special encoding.
UID_CHARSET = string.ascii_letters + string.digits

#: XML parser used on CAS responses: no DTD, no entities resolution and no network access.
#: The body is always utf-8, the encoding declared by the document is ignored.
XML_PARSER = etree.XMLParser(
    encoding="utf-8",
    resolve_entities=False,
    no_network=True,
    load_dtd=False,
    remove_comments=True,
    remove_pis=True,
)


def import_attr(path):
    """
        transform a python dotted path to the attr

        :param path: A dotted path to a python object or a python object
        :type path: :obj:`str` or :obj:`bytes` or anything
        :return: The python object pointed by the dotted path or the python object unchanged
    """
    # if we got a bytes, decode it to str (normally it should only contain ascii)
    if isinstance(path, bytes):
        path = path.decode("utf-8")
    # if path is not a str, return it unchanged (may be it is already the attribute to import)
    if not isinstance(path, str):
        return path
    if "." not in path:
        raise ValueError("%r should be of the form `module.attr` and we just got `attr`" % path)
    module, attr = path.rsplit('.', 1)
    try:
        return getattr(import_module(module), attr)
    except ImportError:
        raise ImportError("Module %r not found" % module)
    except AttributeError:
        raise AttributeError("Module %r has not attribut %r" % (module, attr))


def update_url(url, params):
    """
        update parameters using ``params`` in the ``url`` query string. Parameters with a
        ``None`` value are left out.

        :param str url: An URL possibily with a querystring
        :param dict params: A dictionary of parameters for updating the url querystring
        :return: The URL with an updated querystring, parameters sorted by name
        :rtype: str
    """
    url_parts = list(urlparse(url))
    query = dict(parse_qsl(url_parts[4], keep_blank_values=True))
    query.update((key, value) for (key, value) in params.items() if value is not None)
    url_parts[4] = urlencode(sorted(query.items()))
    return urlunparse(url_parts)


def remove_params(url, names):
    """
        remove the parameters ``names`` from the ``url`` query string, keeping the other
        parameters in their original order.

        :param str url: An URL possibily with a querystring
        :param set names: The names of the parameters to remove
        :return: The URL without the parameters ``names``
        :rtype: str
    """
    url_parts = list(urlparse(url))
    query = [
        (key, value) for (key, value) in parse_qsl(url_parts[4], keep_blank_values=True)
        if key not in names
    ]
    url_parts[4] = urlencode(query)
    return urlunparse(url_parts)


def resolve_service_url(base_url, service_url):
    """
        Resolve ``service_url`` against ``base_url`` and strip the ``ticket`` parameter

        :param str base_url: The base URL of the application, may be ``None`` if ``service_url``
            is absolute.
        :param str service_url: An absolute URL or a path relative to ``base_url``
        :return: An absolute service URL without any ``ticket`` GET parameter
        :rtype: str
    """
    if base_url:
        service_url = urljoin(base_url, service_url)
    return remove_params(service_url, {"ticket"})


def gen_state(length=24):
    """
        Generate a random string usable as a state nonce

        :param int length: The number of characters of the state
        :return: A random string of ``length`` characters from :obj:`UID_CHARSET`
        :rtype: str
    """
    generator = random.SystemRandom()
    return ''.join(generator.choice(UID_CHARSET) for _ in range(length))


def normalize_text(text):
    """
        Trim ``text`` and collapse any whitespace sequence to a single space

        :param text: A text node, possibly ``None``
        :type text: :obj:`str` or :obj:`NoneType<types.NoneType>`
        :return: The normalized text, empty if ``text`` is ``None``
        :rtype: str
    """
    if text is None:
        return ''
    return ' '.join(text.split())


def localname(element):
    """
        :param lxml.etree._Element element: An XML element
        :return: The tag of ``element`` lower cased without namespace nor prefix
        :rtype: str
    """
    return etree.QName(element).localname.lower()


def parse_xml(body):
    """
        Parse a CAS response body

        :param str body: The response body
        :return: The root element
        :rtype: lxml.etree._Element
        :raises lxml.etree.XMLSyntaxError: if ``body`` is not well formed XML
    """
    return etree.fromstring(body.encode('utf-8'), XML_PARSER)


def children(element, name):
    """
        :param element: An XML element, possibly ``None``
        :param str name: A lower cased tag name without namespace
        :return: The children of ``element`` named ``name``, empty if ``element`` is ``None``
        :rtype: list
    """
    if element is None:
        return []
    return [
        child for child in element
        if isinstance(child.tag, str) and localname(child) == name
    ]


def find_path(element, *names):
    """
        Walk down from ``element`` following the first child matching each name of ``names``

        :param element: An XML element, possibly ``None``
        :param names: Lower cased tag names without namespace
        :return: The element at the end of the path or ``None`` if any step is missing
    """
    for name in names:
        matches = children(element, name)
        if not matches:
            return None
        element = matches[0]
    return element


def add_value(mapping, key, value):
    """
        Store ``value`` under ``key`` in ``mapping``. A single value is stored as is,
        repeated values are stored as a list in their order of appearance.

        :param dict mapping: The mapping to update
        :param str key: The key
        :param value: The value to add
    """
    if key in mapping:
        if isinstance(mapping[key], list):
            mapping[key].append(value)
        else:
            mapping[key] = [mapping[key], value]
    else:
        mapping[key] = value


def element_to_dict(element):
    """
        Convert an XML element to python objects: an element with only text becomes its
        normalized text, other elements become a :class:`dict` mapping the lower cased tag of
        their children to the converted children (repeated children form a list). XML
        attributes are stored under the ``"$"`` key.

        :param lxml.etree._Element element: An XML element
        :return: The converted element
        :rtype: :obj:`str` or :obj:`dict`
    """
    sub_elements = [child for child in element if isinstance(child.tag, str)]
    if not sub_elements and not element.attrib:
        return normalize_text(element.text)
    data = {}
    if element.attrib:
        data["$"] = dict(element.attrib)
    text = normalize_text(element.text)
    if text:
        data["_"] = text
    for child in sub_elements:
        add_value(data, localname(child), element_to_dict(child))
    return data
