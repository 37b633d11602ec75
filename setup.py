import os
from setuptools import setup, find_packages


__version__ = "0.1.0"

long_description = ""
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, "README.md"), "r", encoding="utf-8") as f:
    long_description = f.read()


setup(
    name="SchulzeBallots",
    version=__version__,
    description="Ranked-ballot parsing and Schulze method winners",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "numba",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "schulze-ballots=schulze_ballots.__main__:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.9",
)
