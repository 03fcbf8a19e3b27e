#!/usr/bin/env python
"""Setup script to make transit_emissions directly installable with pip."""

from pathlib import Path

from setuptools import find_packages, setup

readme_path = Path(__file__).parent / "README.rst"
long_description = readme_path.read_text()

setup(
    name="transit-emissions",
    version="0.1.0",
    description="Estimate and compare the CO2 emissions of US public transit agencies.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="MIT",
    keywords=[
        "transit",
        "emissions",
        "climate change",
        "electricity",
        "ntd",
        "national transit database",
        "eia",
        "state electricity profiles",
    ],
    python_requires=">=3.11",
    install_requires=[
        "coloredlogs>=15.0,<15.1",
        "fsspec>=2021.7",
        "lxml>=4.6",  # Used by pandas.read_html for the profile pages.
        "numpy>=1.24",
        "openpyxl>=3.0",  # Used by pandas.read_excel for the NTD workbook.
        "pandas>=2.0",
        "pyarrow>=12",
        "pydantic>=2.0,<3",
        "pydantic-settings>=2.0,<3",
        "pyyaml>=5,<7",
        "requests>=2.28",
        "urllib3>=1.26",
    ],
    extras_require={
        "test": [
            "pytest>=6.2",
            "pytest-mock>=3.0",
            "responses>=0.17",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering",
    ],
    packages=find_packages("src"),
    package_dir={"": "src"},
    # package_data is data that is deployed within the python package on the
    # user's system.
    package_data={"transit_emissions": ["package_data/settings/*.yml"]},
    # This defines the interfaces to the command line scripts we're including:
    entry_points={
        "console_scripts": [
            "transit_emissions_etl = transit_emissions.cli:main",
        ]
    },
)
