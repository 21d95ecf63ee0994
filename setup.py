from setuptools import setup, find_packages

setup(
    name="vpnctl",
    version="0.1.0",
    description="Command-line client for controlling the VPN daemon over local IPC",
    license="MIT",
    packages=find_packages(include=["vpnctl", "vpnctl.*"]),
    install_requires=[
        "typer>=0.9.0,<0.26",
        "click>=8.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "vpnctl=vpnctl.main:vpnctl",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
