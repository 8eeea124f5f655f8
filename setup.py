"""Setup file for the sheets_store package."""

from setuptools import setup, find_packages

setup(
    name="sheets_store",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "httpx",
        "pydantic>=2",
        "pydantic-settings"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio"
        ]
    },
    entry_points={
        "console_scripts": [
            "sheets-store=sheets_store.cli:main"
        ]
    }
)
