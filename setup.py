"""
Setup script for SimpleBoot
"""

from setuptools import setup, find_packages

with open('README.md', 'r') as f:
    long_description = f.read()

with open('requirements.txt', 'r') as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name='simpleboot',
    version='1.0.0',
    description='SimpleBoot - USB mass storage gadget orchestration for rooted devices',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='SimpleBoot',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-mock>=3.11.1',
            'mock>=5.1.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'simpleboot=simpleboot.cli.main:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
    ],
    python_requires='>=3.8',
)
