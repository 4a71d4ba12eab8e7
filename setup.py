"""
Packaging for nvpage. Install with `pip install -e .[test]` and run the tests with `pytest src`.
"""

from setuptools import setup


setup(
    name='nvpage',
    version='0.0.1',
    description='Connects the page pager to neovim: sessions, child processes, notifications, '
                'instance buffers and buffer titles.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['nvpage', 'nvpage.config', 'nvpage.connector', 'nvpage.rpc', 'nvpage.support'],
    package_data={'nvpage.config': ['*.cfg']},
    python_requires='>=3.6',
    install_requires=[
        'pynvim',
        'configobj',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest',
            'timeout-decorator',
        ],
    },
    zip_safe=False,
)
