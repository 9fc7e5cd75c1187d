from setuptools import setup

setup(
    name="linesuffix",
    version="1.0.0",
    description=(
        "Provides a single pass text stream which appends a suffix to every non-empty line of an underlying "
        "source, with an optional distinct suffix for the first line. Useful for adding a trailing column to "
        "large CSV files without loading them into memory."
    ),
    packages=["linesuffix"],
    python_requires=">=3.7",
    install_requires=[],
    extras_require={"test": ["pytest>=7.0"]},
    entry_points={"console_scripts": ["linesuffix=linesuffix.linesuffix:run"]},
)
