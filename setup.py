from setuptools import setup, find_packages
import re

# Read version from salarycalc/__init__.py
with open('salarycalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='salarycalc',
    version=version,
    packages=find_packages(include=['salarycalc', 'salarycalc.*']),
    package_data={
        'salarycalc': ['rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'salary-calc=salarycalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Gross/net salary conversion under progressive income tax and social insurance.',
    python_requires='>=3.10',
)
