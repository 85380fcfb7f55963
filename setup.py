from setuptools import setup

setup(
    name="rubrik-cdm-client",
    version="1.0.0",
    description="Convenience functions and CLI for the Rubrik CDM REST API",
    packages=["rubrik_cdm", "rubrik_cdm.cli", "rubrik_cdm.lib"],
    python_requires=">=3.7",
    install_requires=[
        "Click",
        "PyYAML",
        "colorama",
        "requests",
        "urllib3",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "rubrik = rubrik_cdm.cli.cli:cli",
        ],
    },
)
