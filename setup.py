"""Setup script for the netwatch package."""

from setuptools import find_packages, setup

setup(
    name="netwatch",
    version="0.1.0",
    description="Network reachability watcher for device displays",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "paho-mqtt>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "netwatch-reachability=netwatch.reachability:main",
        ],
    },
)
