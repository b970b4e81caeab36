#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import re
from setuptools import setup, find_packages
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

with open(path.join(here, 'unp7m', '__init__.py'), encoding='utf-8') as f:
    version = re.search(r"^__version__ = '([^']+)'", f.read(), re.M).group(1)

setup(
    name='unp7m',
    version=version,
    description='Extract the signed content of PKCS#7 / CMS .p7m files (Italian PEC attachments) without openssl.',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    license='MIT',
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Communications :: Email',
        'Topic :: Security :: Cryptography',
        'Topic :: Office/Business',
    ],
    keywords='cryptography pki pkcs7 cms p7m pec asn1 der',
    packages=find_packages(exclude=['examples', 'tests']),
    include_package_data=True,
    platforms=["all"],
    python_requires='>=3.7',
    install_requires=['cryptography', 'asn1crypto', 'attrs'],
    entry_points={
        'console_scripts': [
            'unp7m = unp7m.cli:main',
        ],
    },
    test_suite="tests",
)
