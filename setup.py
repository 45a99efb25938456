from setuptools import setup, find_packages

setup(
    name="vpn-client",
    version="0.1.0",
    description="Simulated VPN connection control with an append-only event history",
    author="vpn-client Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.0",
        "rich>=13.0",
        "python-dateutil>=2.8",
        "filelock>=3.12",
        "structlog>=23.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vpn-client=vpnclient.cli:main",
        ],
    },
)
