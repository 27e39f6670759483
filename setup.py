from setuptools import setup, find_packages

setup(
    name="columnar-inspector",
    version="0.1.0",
    description="Size, compression and page layout statistics for columnar storage containers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.26.0",
        "pydantic>=2.5.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
        "dev": ["pytest>=7.4.0", "black>=23.11.0", "flake8>=6.1.0", "mypy>=1.7.0"],
    },
)
