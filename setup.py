# setup.py
from setuptools import setup, find_packages

setup(
    name="docs_downloader",
    version="1.0.0",
    description="Universal documentation downloader that converts docs sites to markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "markdownify>=1.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "docs-downloader=docs_downloader.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
