#!/usr/bin/env python
# coding: utf-8

from setuptools import setup

version = '0.1.0'

# Prepare install requires and extra requires
install_requires = [
    'python_dateutil',
    ]
extras_require = {
    'tests': ['pytest'],
    }
extras_require['all'] = [
    dependency
    for extra in extras_require.values()
    for dependency in extra]

# Prepare the long description from readme
with open('README.rst', encoding='utf-8') as readme:
    description = readme.read()

setup(
    name='workreport',
    description='work-report - What did you commit last week, month, year?',
    long_description=description,

    version=version,
    provides=['workreport'],
    packages=['workreport'],
    scripts=['bin/work-report'],
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires='>=3.9',

    license='GPLv2+',

    keywords=['git', 'commits', 'report', 'work'],
    classifiers=[
        'License :: OSI Approved :: '
            'GNU General Public License v2 or later (GPLv2+)',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Version Control :: Git',
        'Topic :: Utilities',
        ],

    data_files=[],
    dependency_links=[],
    package_dir={},
    zip_safe=False,
    )
