# setup.py
from setuptools import setup, find_packages

setup(
    name="intention",
    version="0.1.0",
    description="Per-file intent tracking with conflict detection for AI-assisted edits",
    packages=find_packages(include=["intention", "intention.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.6.3",
        "structlog>=24.1.0",
        "python-dotenv>=1.0.1",
        "PyYAML>=6.0.1",
        "typer>=0.9.0",
        "rich>=13.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'intention=intention.cli:main',
        ],
    },
)
