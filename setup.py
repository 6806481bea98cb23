"""
Population Forecast Engine
Hybrid logistic population projections with scenario swing factors,
shock events, regional split and sensitivity analysis.
"""

from setuptools import setup, find_packages

setup(
    name="population-engine",
    version="1.0.0",
    description="Population forecast engine: hybrid exponential/logistic projections "
                "with scenario swings, shocks, policy responses and regional split.",
    packages=find_packages(include=["population_engine", "population_engine.*"]),
    py_modules=["cli"],
    package_data={"population_engine": ["data/*.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "pyyaml>=6.0",
        "requests>=2.28",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "population-engine=cli:main",
        ],
    },
)
