import os
from setuptools import setup
from cas_client import VERSION

with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as readme:
    README = readme.read()

if __name__ == '__main__':
    # allow setup.py to be run from any path
    os.chdir(os.path.normpath(os.path.join(os.path.abspath(__file__), os.pardir)))

    setup(
        name='django-cas-client',
        version=VERSION,
        packages=['cas_client', 'cas_client.tests'],
        include_package_data=True,
        license='GPLv3',
        description=(
            'A Django Central Authentication Service client '
            'implementing the CAS 1.0, CAS 3.0 and SAML 1.1 ticket validation'
        ),
        long_description=README,
        author='Valentin Samir',
        author_email='valentin.samir@crans.org',
        classifiers=[
            'Environment :: Web Environment',
            'Development Status :: 4 - Beta',
            'Framework :: Django',
            'Framework :: Django :: 3.2',
            'Framework :: Django :: 4.2',
            'Intended Audience :: Developers',
            'Intended Audience :: System Administrators',
            'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
            'Operating System :: OS Independent',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: Software Development :: Libraries :: Python Modules',
            'Topic :: Internet :: WWW/HTTP',
            'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
            'Topic :: System :: Systems Administration :: Authentication/Directory'
        ],
        keywords=['django', 'cas', 'cas3', 'client', 'sso', 'single sign-on', 'authentication', 'auth'],
        install_requires=[
            'Django >= 3.2', 'requests >= 2.4', 'requests_futures >= 0.9.5', 'lxml >= 3.4'
        ],
        zip_safe=False,
        tests_require=['pytest', 'pytest-django', 'mock>=1'],
        extras_require={
            'test': ['pytest', 'pytest-django', 'mock>=1'],
        },
    )
