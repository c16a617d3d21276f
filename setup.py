#!/usr/bin/env python
import os
from setuptools import setup, find_packages
from netstoragefs.constants import version

def read(fname):
    full_path = os.path.join(os.path.dirname(__file__), fname)
    if os.path.exists(full_path):
        with open(full_path) as fd:
            return fd.read()
    else:
        return ""

setup(name='netstorage-fs',
      version=version,
      description='Filesystem interface to Akamai NetStorage (FileStore API)',
      long_description = read('README.rst'),
      license='MIT',
      include_package_data=True,
      zip_safe=False,
      python_requires='>=3.8',
      install_requires=['requests>=2.20', 'pyftpdlib>=1.5.0'],
      extras_require={'test': ['pytest']},
      packages = find_packages(exclude=['tests',]),
      classifiers = [
        'Development Status :: 4 - Beta',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: MIT License',
        ],
      )
