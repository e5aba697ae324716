#!/usr/bin/env python
import os
from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as fv:
    version = fv.read().strip()

setup(name='gpcov',
      version=version,
      author='Emmanuel Vazquez',
      author_email='emmanuel.vazquez@centralesupelec.fr',
      description='GPcov: covariance matrices and gradients of stationary kernels',
      long_description=long_description,
      long_description_content_type="text/markdown",
      url='https://github.com/gpmp-dev/gpcov',
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
          "Operating System :: OS Independent",
      ],
      packages=['gpcov', 'gpcov.num', 'gpcov.kernel'],
      license='LICENSE.txt',
      install_requires=[
             "numpy",
             "scipy>=1.8.0",
         ],
      extras_require={
          "test": ["pytest"],
      },
      python_requires=">=3.8",
      )
