from setuptools import find_namespace_packages, setup

setup(
    name="dirsize",
    version="0.1.0",
    description="Per-entry disk usage of a directory, sorted by size, with three-decimal precision",
    python_requires=">=3.12",
    packages=find_namespace_packages(include=["dirsize", "dirsize.*"]),
    install_requires=[
        "click>=8.1",
        "result>=0.17",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": [
            "dirsize=dirsize.cli:main",
        ],
    },
)
