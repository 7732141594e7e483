from setuptools import setup, find_packages
import re

# Read version from bracketcalc/__init__.py
with open('bracketcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='bracket-calc',
    version=version,
    packages=find_packages(include=['bracketcalc', 'bracketcalc.*']),
    package_data={
        'bracketcalc': ['rule-sets/*/*.yaml', 'rule-sets/*/*.json'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bracket-calc=bracketcalc.cli.__main__:main',
            'bracket-calc-mcp=bracketcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Dated tax and contribution bracket resolution.',
    python_requires='>=3.10',
)
