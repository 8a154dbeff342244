"""Access logging for HTTP applications. Renders one line per request
from a template of named tokens (``:method``, ``:status``,
``:response-time``, ...) or a named preset such as Apache's combined
log format, and comes with WSGI middleware that times each request.
"""

from setuptools import setup, find_packages


__author__ = 'organ contributors'
__version__ = '0.1.0'
__license__ = 'BSD'

desc = ('Token-based HTTP access logging with presets and'
        ' WSGI middleware.')


setup(name='organ',
      version=__version__,
      description=desc,
      long_description=__doc__,
      author=__author__,
      packages=find_packages(),
      install_requires=['boltons>=20.0.0'],
      extras_require={'test': ['pytest>=6.0']},
      python_requires='>=3.7',
      include_package_data=True,
      zip_safe=False,
      license=__license__,
      platforms='any',
      classifiers=[
          'Intended Audience :: Developers',
          'Topic :: System :: Logging',
          'Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware',
          'Topic :: Utilities',
          'License :: OSI Approved :: BSD License',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: Implementation :: CPython',
          'Programming Language :: Python :: Implementation :: PyPy',
      ]
)


"""
A brief checklist for release:

* pytest
* git commit (if applicable)
* Bump setup.py version off of -dev
* git commit -a -m "bump version for x.y.z release"
* python -m build && twine upload dist/*
* git tag -a x.y.z -m "brief summary"
* write CHANGELOG
* bump setup.py version onto n+1 dev
* git commit
* git push

"""
