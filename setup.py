#!/usr/bin/env python3
"""Setup script for the Jira REST client."""

from setuptools import find_packages, setup

# Read requirements from requirements.txt file
with open("requirements.txt") as f:
    requirements = f.read().splitlines()

# Remove any comments or blank lines from requirements
requirements = [line for line in requirements if line and not line.startswith("#")]

setup(
    name="jira-rest-client",
    version="1.0.0",
    description="Async Jira Cloud REST client with a declarative endpoint catalog",
    packages=find_packages(include=["jira_rest", "jira_rest.*"]),
    package_data={"jira_rest.catalog": ["*.yaml"]},
    include_package_data=True,
    python_requires=">=3.12,<4.0",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    license="MIT",  # SPDX license identifier
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
