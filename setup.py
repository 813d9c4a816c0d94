"""
Setup configuration for adinsight package.
"""

from setuptools import setup, find_packages

setup(
    name="adinsight",
    version="0.1.0",
    description="YouTube advertising intelligence: sponsorship detection, engagement and AI ad insights",
    packages=find_packages(include=["adinsight", "adinsight.*"]),
    package_data={"adinsight.analysis": ["data/*.yml"]},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "supabase>=2.0",
        "google-generativeai>=0.8",
        "google-api-python-client>=2.100",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "tenacity>=8.2",
        "click>=8.1",
        "logfire>=0.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "adinsight=adinsight.cli.main:cli",
        ],
    },
)
