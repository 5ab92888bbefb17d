from setuptools import setup

INSTALL_REQUIRES = [
    'textual>=0.86',
    'rich>=13',
]
EXTRAS_REQUIRE = {
    'test': ['pytest>=7'],
}
PACKAGE_DATA = {
    'gsm.wordlist': ['english.txt'],
}

setup(
    name='gsm',
    version='1.0.0',
    description='GSocket Manager: a terminal UI for saved gs-netcat connections',
    python_requires='>=3.9',
    packages=['gsm', 'gsm.tui', 'gsm.wordlist'],
    package_data=PACKAGE_DATA,
    include_package_data=True,
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        'console_scripts': ['gsm=gsm.main:main'],
    },
)
