from setuptools import setup


setup(
    name="fcr-parser",
    version="0.3.0",
    description="Local column recovery and transcript cleanup for messy spreadsheet-exported cargo receipts",
    packages=["fcr_parser"],
    include_package_data=True,
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
        "streamlit",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "fcr-parser=fcr_parser.cli:main",
        ]
    },
)
