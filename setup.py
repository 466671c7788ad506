# setup.py
from setuptools import setup, find_packages

setup(
    name="sitefetch",
    version="0.1.0",
    description="Asynchronous site crawler that exports pages as text or JSON",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "soupsieve>=2.5",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
        "tiktoken>=0.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitefetch=sitefetch.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
