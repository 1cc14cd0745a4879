#!/usr/bin/env python

from setuptools import setup

import pitrapez


read_md = lambda f: open(f, 'r').read()


setup(name='pitrapez',
      version="{ver}.{rev}".format(
          ver=pitrapez.__version__,
          rev=pitrapez.__revision__,
      ),
      description='Parallel trapezoidal estimation of PI',
      long_description=read_md('README.md'),
      long_description_content_type="text/markdown",
      author='pitrapez Development Team',
      python_requires='>=3.7',
      install_requires=['greenlet>=0.3.4',
                        'pyzmq>=13.1.0'],
      extras_require={'test': ['pytest']},
      packages=['pitrapez',
                'pitrapez.bootstrap',
                'pitrapez._comm'],
      entry_points={
          'console_scripts': ['pitrapez=pitrapez.__main__:main'],
      },
      platforms=['any'],
      keywords=['numerical integration',
                'trapezoidal rule',
                'parallel programming',
                'greenlet',
                'zmq'],
      license='LGPL',
      classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU Library or Lesser General Public '
        'License (LGPL)',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Mathematics',
        ],
     )
