"""
Packaging for the created daemon.

Install for development with `pip install -e .[test]` and run the tests with `pytest src`.
The `created` console script starts the daemon.
"""

from setuptools import setup


setup(
    name='created',
    version='0.1.0',
    description='Heartbeat daemon that plays a greeting on an iRobot Create whenever one is plugged in.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['created', 'created.config', 'created.protocol'],
    package_data={'created.config': ['*.cfg']},
    install_requires=[
        'pyserial>=3.0',
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest>=2.0',
            'timeout-decorator',
        ]
    },
    entry_points={
        'console_scripts': ['created = created.daemon:main'],
    },
    zip_safe=False,
)
