from setuptools import setup, find_packages

setup(
    name="svgdoppel",
    version="0.1.0",
    description="Visual regression testing of plots against approved SVG baselines.",
    packages=find_packages(include=["svgdoppel", "svgdoppel.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "xarray",
        "matplotlib>=3.8",
        "packaging",
        "pytest>=8.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "pytest11": ["svgdoppel.pytest_plugin = svgdoppel.pytest_plugin"],
        "console_scripts": [
            "svgdoppel-check-engines = svgdoppel.cli.check_engines:main",
        ],
    },
    python_requires=">=3.11",
)
