# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Setup configuration for gopad-authn package."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="gopad-authn",
    version="0.1.0",
    author="gopad contributors",
    description="External identity federation for the gopad collaborative markdown editor",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(
        include=["gopad_authn", "gopad_authn.*", "gopad_logging", "gopad_logging.*", "gopad_secrets", "gopad_secrets.*"],
    ),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",  # For the login routes
        "starlette>=0.49.1",  # For redirect responses and the test client
        "httpx>=0.27.0",  # For discovery, token exchange and profile requests
        "PyJWT>=2.8.0",  # For ID token and JWKS verification
        "cryptography>=44.0.1",  # For RSA/EC keys in JWKS
        "pydantic>=2.4.0",  # For configuration and validation
        "PyYAML>=6.0",  # For YAML provider files
        "python-slugify>=8.0.0",  # For logins derived from display names
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
