import os, sys, subprocess, unittest
from setuptools import setup

setup(name='bagman',
      version='0.1',
      description="bagman: a Python library for creating, validating, fetching, and packaging BagIt bags",
      scripts=[ ],
      packages=['bagman', 'bagman.access', 'bagman.formats',
                'bagman.validate'],
      install_requires=['bagit', 'fs>=2.4', 'requests'],
      test_suite="tests.suite",
      test_runner="unittest:TextTestRunner"
)
