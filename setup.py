"""Setup configuration for Gatecord Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="gatecord",
    version="1.0.0",
    description="A Discord bot that gatekeeps a server with a ban channel and member verification",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
        "aiohttp>=3.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "gatecord=gatecord.main:main",
        ],
    },
)
