from setuptools import setup, find_packages

setup(
    name="wallet-cache",
    version="0.1.0",
    packages=find_packages(include=["wallet_cache", "wallet_cache.*"]),
    install_requires=[
        "pydantic",
        "pydantic-settings",
        "structlog",
        "prometheus-client"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio"
        ],
    },
    python_requires=">=3.8",
)
