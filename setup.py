"""Setuptools configuration for the JSON-file bulletin board."""

from setuptools import find_packages, setup


setup(
    name="json-bulletin-board",
    version="0.1.0",
    description="Flask bulletin board with one JSON file per board",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    py_modules=[
        "board_config",
        "board_store",
        "run",
        "uploads",
    ],
    package_data={"board": ["templates/*.html", "templates/pages/*.html", "static/*.css"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "Flask>=2.2",
        "Werkzeug>=2.2",
    ],
    extras_require={
        "test": ["pytest", "beautifulsoup4"],
        "docs": ["sphinx"],
    },
    entry_points={
        "console_scripts": ["bulletin-board=run:main"],
    },
)
