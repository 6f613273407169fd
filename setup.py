"""Setup file for editable install compatibility."""
from setuptools import setup, find_packages

setup(
    name="frontier-cloud",
    version="1.0.0",
    description="Monte Carlo efficient frontier with minimum-variance and maximum-Sharpe portfolios",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.20",
        "pandas>=1.3",
        "matplotlib>=3.4",
        "openpyxl>=3.0",
        "requests>=2.25",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "fc-analyze=frontier_cloud.cli.main:main",
            "fc-interactive=frontier_cloud.cli.interactive:main",
        ],
    },
    python_requires=">=3.8",
)
