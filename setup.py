"""setuptools setup for countchain.

Install for development:
    pip install -e ".[test]"
    python -m countchain "25m + 5m"
"""

from setuptools import setup, find_packages

setup(
    name="countchain",
    version="0.1.0",
    description="Chains of countdown timers typed as plain text",
    packages=find_packages(include=["countchain", "countchain.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["countchain=countchain.__main__:main"],
    },
)
